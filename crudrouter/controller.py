#  This file contains the controllers for exposed models:
#  - Controller: superclass, path & operation set configuration and nested registration
#  - ResourceController: CRUD on a top-level model
#
# The relationship controllers are implemented in relation_controllers.py
#
# Controller handlers are bound to the http router by CrudApi.bind, they receive the
# url path parameters as keyword arguments and read the request body from flask.request
#
from http import HTTPStatus
from flask import make_response, request
from .errors import NotFoundError
from .id_types import get_id_type
from .operations import create_status, register_operations, select_operations
from .paths import compose_path, id_placeholder
from .relationships import RelationKind


class Controller:
    """
    Superclass for the controllers

    A controller binds a model, a path, an operation set and the router (CrudApi).
    It is created once, when the routes are registered.
    """

    # key of the MAXIMAL_OPERATIONS table
    kind = "resource"

    def __init__(self, api, model, path, methods=None):
        """
        :param api: CrudApi, the router
        :param model: sqlalchemy model class exposed by the controller
        :param path: collection path of the controller
        :param methods: Only/Except operation selector
        """
        self.api = api
        self.store = api.store
        self.codec = api.codec
        self.model = model
        self.id_type = get_id_type(model)
        self.path = tuple(path)
        self.id_placeholder = id_placeholder(model, self.path)
        self.operations = select_operations(methods, self.kind)

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.model.__name__} {'/'.join(str(t) for t in self.path)}>"

    @property
    def id_path(self):
        """
        :return: path of a single instance
        """
        return compose_path(self.path, (self.id_placeholder,))

    @property
    def nested_path(self):
        """
        :return: path where the relationships of the instance are exposed
        """
        return self.id_path

    def endpoint_name(self, operation):
        """
        :return: flask endpoint name, e.g. "api.user.user_id.book.read_one" (prefix, collection path, operation)
        """
        segments = [segment for segment in (self.api.prefix or "").split("/") if segment]
        segments += [token if isinstance(token, str) else token.name for token in self.path]
        return ".".join(segments + [operation.value])

    def boot(self):
        """
        Register the operations with the router
        """
        return register_operations(self.operations, self.api, self, self.path, self.id_path)

    def lookup(self, ids):
        """
        :param ids: url path parameters
        :return: the instance identified by ids
        :raises NotFoundError:
        """
        raise NotImplementedError

    def path_id(self, ids):
        return self.id_type.validate_id(ids.get(self.id_placeholder.name))

    def decode(self, model=None, exclude=()):
        """
        Decode the request body into a new model instance
        """
        return self.codec.decode(model or self.model, self.request_body(), exclude=exclude)

    @staticmethod
    def request_body():
        return request.get_data()

    def encode(self, instance):
        return self.codec.encode(instance)

    def create_exclude(self, model=None):
        """
        :return: attributes that a client isn't allowed to set on creation,
        i.e. the primary key unless `allow_client_generated_ids` is set on the model
        """
        model = model or self.model
        if getattr(model, "allow_client_generated_ids", False):
            return ()
        return (get_id_type(model).attr_name,)

    @staticmethod
    def status_only(status=HTTPStatus.OK):
        return make_response("", status)

    #
    # Nested registration: each method registers a relationship controller under
    # {self.nested_path}/{relation path} and returns it, so it can be nested further:
    #
    #   api.crud(User).with_children("books").with_siblings("tags")
    #
    def with_parent(self, rel_name, path=None, methods=None, configure=None):
        """
        Expose the to-one relationship `rel_name` (READ_ONE and UPDATE only)
        """
        return self.api.register_relation(self, RelationKind.PARENT, rel_name, path, methods, configure)

    def with_children(self, rel_name, path=None, methods=None, configure=None):
        """
        Expose the one-to-many relationship `rel_name`
        """
        return self.api.register_relation(self, RelationKind.CHILDREN, rel_name, path, methods, configure)

    def with_siblings(self, rel_name, path=None, methods=None, configure=None, delete_related=False):
        """
        Expose the many-to-many relationship `rel_name`
        :param delete_related: DELETE also deletes the sibling, not only the link
        """
        return self.api.register_relation(
            self, RelationKind.SIBLINGS, rel_name, path, methods, configure, delete_related=delete_related
        )


class ResourceController(Controller):
    """
    CRUD handlers for a top-level model

        GET    /todo              read_all
        GET    /todo/<todo_id>    read_one
        POST   /todo              create
        PUT    /todo/<todo_id>    update
        DELETE /todo/<todo_id>    delete
    """

    def lookup(self, ids):
        id = self.path_id(ids)
        instance = self.store.find_by_id(self.model, id)
        if instance is None:
            raise NotFoundError(f'Invalid "{self.model.__name__}" ID "{id}"')
        return instance

    def read_all(self, **ids):
        instances = self.store.find_all(self.model)
        return [self.encode(instance) for instance in instances], HTTPStatus.OK

    def read_one(self, **ids):
        return self.encode(self.lookup(ids)), HTTPStatus.OK

    def create(self, **ids):
        instance = self.decode(exclude=self.create_exclude())
        instance = self.store.save(instance)
        return self.encode(instance), create_status()

    def update(self, **ids):
        existing = self.lookup(ids)
        instance = self.decode()
        # the id in the url wins over the id in the body
        self.id_type.set_id(instance, self.id_type.get_id(existing))
        instance = self.store.save(instance)
        return self.encode(instance), HTTPStatus.OK

    def delete(self, **ids):
        instance = self.lookup(ids)
        self.store.delete(instance)
        return self.status_only()
