# flask_restful API subclass: the router the controllers bind their handlers to
import logging
from contextlib import nullcontext
from functools import wraps
from typing import Callable, List, Tuple
import werkzeug
from flask import Flask, has_app_context
from flask_restful import Api, Resource, abort
import crudrouter
from .codec import JSONCodec
from .config import get_config
from .controller import ResourceController
from .errors import ConfigurationError, CrudError
from .json_encoder import CrudJSONEncoder
from .paths import resolve_path, route_signature, to_rule
from .relation_controllers import ChildrenController, ParentController, SiblingsController
from .relationships import RelationKind, describe_relationship
from .store import SQLAlchemyStore

HTTP_METHODS = ["GET", "POST", "PUT", "DELETE"]

RELATION_CONTROLLERS = {
    RelationKind.PARENT: ParentController,
    RelationKind.CHILDREN: ChildrenController,
    RelationKind.SIBLINGS: SiblingsController,
}


class CrudResource(Resource):
    """
    Superclass for the generated resources,
    a generated class implements a single http method that calls the controller handler
    """

    handler = None


class CrudApi(Api):
    """
    Subclass of the flask_restful API class where we add the crud method:
    this method creates the CRUD endpoints for a sqlalchemy model

        api = CrudApi(app)
        api.crud(User).with_children("books").with_parent("user")
    """

    def __init__(self, app: Flask, prefix: str = None, store=None, codec=None, **kwargs) -> None:
        """
        :param app: flask app
        :param prefix: url prefix, defaults to the CRUD_URL_PREFIX setting
        :param store: DataStore, defaults to a SQLAlchemyStore on the app flask_sqlalchemy extension
        :param codec: request body codec, defaults to JSONCodec
        :param kwargs: crudrouter settings (e.g. CRUD_ID_SUFFIX) and flask_restful.Api arguments
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        for conf_name in [name for name in kwargs if name.startswith("CRUD_")]:
            app.config[conf_name] = kwargs.pop(conf_name)

        if app.config.get("DEBUG", False):
            crudrouter.log.setLevel(logging.DEBUG)

        with app.app_context():
            if prefix is None:
                prefix = get_config("CRUD_URL_PREFIX") or ""
            loglevel = get_config("CRUD_LOGLEVEL")

        if loglevel is not None:
            crudrouter.log.setLevel(int(loglevel))

        if store is None:
            app_db = app.extensions.get("sqlalchemy")
            if app_db is None:
                raise ConfigurationError("No data store: initialize flask_sqlalchemy or pass a store")
            store = SQLAlchemyStore(app_db)

        self.store = store
        self.codec = codec if codec is not None else JSONCodec()
        # (http verb, url rule) => endpoint
        self._bound = {}
        # (http verb, route signature) => url rule
        self._signatures = {}
        prefix = prefix.strip("/")
        super().__init__(app, prefix=f"/{prefix}" if prefix else "", **kwargs)
        restful_json = app.config.setdefault("RESTFUL_JSON", {})
        restful_json.setdefault("cls", CrudJSONEncoder)

    def _app_context(self):
        """
        Routes are usually registered outside of the app context, we need it to read the app config
        """
        if has_app_context():
            return nullcontext()
        return self.app.app_context()

    @property
    def route_table(self) -> List[Tuple[str, str, str]]:
        """
        :return: the bound (http verb, url rule, endpoint) triples, in registration order
        """
        return [(verb, rule, endpoint) for (verb, rule), endpoint in self._bound.items()]

    def crud(self, model, *path, methods=None, configure: Callable = None) -> ResourceController:
        """
        Create the CRUD endpoints for model

        :param model: sqlalchemy model class
        :param path: explicit path (segments), by default the snake_cased class name
        :param methods: Only/Except operation selector, by default all operations
        :param configure: callable invoked with the created controller, to register relationships
        :return: ResourceController, use its with_parent/with_children/with_siblings
                 methods to expose relationships
        """
        with self._app_context():
            controller = ResourceController(self, model, resolve_path(path, model.__name__), methods)
            crudrouter.log.info(f"Exposing {model.__name__} on {to_rule(controller.path, self.prefix)}")
            controller.boot()
            if configure is not None:
                configure(controller)
        return controller

    def expose(self, *models, **kwargs):
        """
        Expose multiple models at once
        """
        return [self.crud(model, **kwargs) for model in models]

    def register_relation(self, base, kind, rel_name, path=None, methods=None, configure=None, **properties):
        """
        Nested registration: create the controller for relationship `rel_name` of the `base` controller model

        :param base: base controller
        :param kind: RelationKind
        :param rel_name: name of the relationship attribute
        :param properties: additional controller arguments (e.g. delete_related for siblings)
        :return: relationship controller
        """
        with self._app_context():
            relationship = describe_relationship(base.model, rel_name, kind)
            rel_path = resolve_path(path, relationship.related.__name__)
            controller = RELATION_CONTROLLERS[kind](self, base, relationship, rel_path, methods, **properties)
            crudrouter.log.info(f"Exposing relationship {relationship} on {to_rule(controller.path, self.prefix)}")
            controller.boot()
            if configure is not None:
                configure(controller)
        return controller

    def bind(self, verb: str, path, handler: Callable, endpoint: str = None) -> Tuple[str, str]:
        """
        Bind handler to (verb, path)

        :param verb: http method
        :param path: paths.Path
        :param handler: controller handler, called with the url path parameters
        :param endpoint: flask endpoint name
        :return: (verb, url rule)
        :raises ConfigurationError: when (verb, path) has been bound before
        """
        verb = verb.upper()
        if verb not in HTTP_METHODS:
            raise ConfigurationError(f"Unsupported http method {verb}")
        rule = to_rule(path)
        key = (verb, to_rule(path, self.prefix))
        signature = (verb, route_signature(path, self.prefix))
        if signature in self._signatures:
            raise ConfigurationError(f"Duplicate route {verb} {key[1]}, it conflicts with {self._signatures[signature]}")
        if endpoint is None:
            endpoint = f"{rule}.{verb.lower()}"
        if endpoint in self.app.view_functions:
            raise ConfigurationError(f"Duplicate endpoint {endpoint}")

        method = http_method_decorator(handler, self.store)
        properties = {verb.lower(): lambda resource, **kwargs: method(**kwargs), "handler": handler}
        api_class = type(f"{endpoint}_API", (CrudResource,), properties)

        crudrouter.log.info(f"Exposing {verb} {key[1]}, endpoint: {endpoint}")
        self.add_resource(api_class, rule, endpoint=endpoint, methods=[verb])
        self._bound[key] = endpoint
        self._signatures[signature] = key[1]
        return key


def http_method_decorator(fun, store):
    """
    Decorator for the controller handlers
    - commit the store
    - convert all exceptions to a JSON serializable error response

    This method will be called for all requests
    :param fun: handler
    :param store: DataStore
    :return: wrapped fun
    """

    @wraps(fun)
    def method_wrapper(*args, **kwargs):
        """
        Wrap the method and perform error handling
        :param *args:
        :param **kwargs:
        :return: result of the wrapped method
        """
        try:
            result = fun(*args, **kwargs)
            store.commit()
            return result

        except CrudError as exc:
            status_code = exc.status_code
            message = exc.message

        except werkzeug.exceptions.HTTPException as exc:
            status_code = exc.code
            message = exc.description

        except Exception as exc:
            status_code = getattr(exc, "status_code", 500)
            crudrouter.log.exception(exc)
            if crudrouter.log.getEffectiveLevel() > logging.DEBUG:
                message = "Logging Disabled"
            else:
                message = str(exc)

        store.rollback()
        crudrouter.log.error(message)
        errors = dict(detail=message)
        abort(status_code, errors=[errors])

    return method_wrapper
