#  Relationship controllers: CRUD on the models reached from a base controller through
#  a named relationship
#  - ParentController: to-one relationship (MANYTOONE), READ_ONE and UPDATE
#  - ChildrenController: one-to-many relationship
#  - SiblingsController: many-to-many relationship (through a secondary table)
#
#  The base instance is resolved with the base controller `lookup`, which resolves its own
#  base in turn: the whole chain of ids in the url has to be consistent.
#
from http import HTTPStatus
import crudrouter
from .attr_parse import parse_attr
from .controller import Controller
from .errors import NotFoundError
from .operations import create_status
from .paths import compose_path


class RelationController(Controller):
    """
    Superclass for the relationship controllers

    :param base: controller of the base model
    :param relationship: relationships.Relationship descriptor
    """

    def __init__(self, api, base, relationship, path, methods=None):
        self.base = base
        self.relationship = relationship
        path = compose_path(base.nested_path, path)
        super().__init__(api, relationship.related, path, methods)

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.relationship} {'/'.join(str(t) for t in self.path)}>"

    @property
    def rel_name(self):
        return self.relationship.name

    def base_lookup(self, ids):
        return self.base.lookup(ids)

    def not_found(self, base, id=None):
        if id is None:
            return NotFoundError(f"No {self.relationship} for {self.base.model.__name__} {self.store.primary_key(base)}")
        return NotFoundError(f'No "{self.model.__name__}" ID "{id}" in {self.relationship} of {self.store.primary_key(base)}')


class ParentController(RelationController):
    """
    Expose the parent of a child instance

        GET /book/<book_id>/user    read_one
        PUT /book/<book_id>/user    update

    The update replaces the data of the current parent, it doesn't assign another parent to the child.
    """

    kind = "parent"

    @property
    def id_path(self):
        # a to-one relationship is identified by the base instance
        return self.path

    def lookup(self, ids):
        child = self.base_lookup(ids)
        parent = self.store.load_related(child, self.rel_name)
        if parent is None:
            raise self.not_found(child)
        return parent

    def read_one(self, **ids):
        return self.encode(self.lookup(ids)), HTTPStatus.OK

    def update(self, **ids):
        parent = self.lookup(ids)
        instance = self.decode()
        self.id_type.set_id(instance, self.id_type.get_id(parent))
        instance = self.store.save(instance)
        return self.encode(instance), HTTPStatus.OK


class ChildrenController(RelationController):
    """
    Expose the children of a parent instance

        GET    /user/<user_id>/book              read_all
        GET    /user/<user_id>/book/<book_id>    read_one
        POST   /user/<user_id>/book              create
        PUT    /user/<user_id>/book/<book_id>    update
        DELETE /user/<user_id>/book/<book_id>    delete

    A child that exists but belongs to another parent is not found.
    """

    kind = "children"

    @property
    def foreign_key_attrs(self):
        return tuple(child_attr for child_attr, _ in self.relationship.foreign_keys)

    def assign_parent(self, child, parent):
        """
        Set the foreign keys of child so it references parent
        """
        for child_attr, parent_attr in self.relationship.foreign_keys:
            setattr(child, child_attr, getattr(parent, parent_attr))

    def find_child(self, parent, ids):
        id = self.path_id(ids)
        child = self.store.find_related(parent, self.rel_name, id)
        if child is None:
            raise self.not_found(parent, id)
        return child

    def lookup(self, ids):
        return self.find_child(self.base_lookup(ids), ids)

    def read_all(self, **ids):
        parent = self.base_lookup(ids)
        children = self.store.find_all_related(parent, self.rel_name)
        return [self.encode(child) for child in children], HTTPStatus.OK

    def read_one(self, **ids):
        return self.encode(self.lookup(ids)), HTTPStatus.OK

    def create(self, **ids):
        parent = self.base_lookup(ids)
        child = self.decode(exclude=self.create_exclude() + self.foreign_key_attrs)
        self.assign_parent(child, parent)
        child = self.store.save(child)
        return self.encode(child), create_status()

    def update(self, **ids):
        parent = self.base_lookup(ids)
        existing = self.find_child(parent, ids)
        child = self.decode(exclude=self.foreign_key_attrs)
        self.id_type.set_id(child, self.id_type.get_id(existing))
        # the child can't be moved to another parent through the body
        self.assign_parent(child, parent)
        child = self.store.save(child)
        return self.encode(child), HTTPStatus.OK

    def delete(self, **ids):
        child = self.lookup(ids)
        self.store.delete(child)
        return self.status_only()


class SiblingsController(RelationController):
    """
    Expose the siblings of an instance, related through a secondary (join) table

        GET    /planet/<planet_id>/tag             read_all
        GET    /planet/<planet_id>/tag/<tag_id>    read_one
        POST   /planet/<planet_id>/tag             create: link an existing tag (by id) or create and link a new one
        PUT    /planet/<planet_id>/tag/<tag_id>    update
        DELETE /planet/<planet_id>/tag/<tag_id>    delete: remove the link (and the tag if delete_related is set)
    """

    kind = "siblings"

    def __init__(self, api, base, relationship, path, methods=None, delete_related=False):
        super().__init__(api, base, relationship, path, methods)
        self.delete_related = delete_related

    def find_sibling(self, base, ids):
        id = self.path_id(ids)
        sibling = self.store.find_related(base, self.rel_name, id)
        if sibling is None:
            raise self.not_found(base, id)
        return sibling

    def lookup(self, ids):
        return self.find_sibling(self.base_lookup(ids), ids)

    def read_all(self, **ids):
        base = self.base_lookup(ids)
        siblings = self.store.find_all_related(base, self.rel_name)
        return [self.encode(sibling) for sibling in siblings], HTTPStatus.OK

    def read_one(self, **ids):
        return self.encode(self.lookup(ids)), HTTPStatus.OK

    def create(self, **ids):
        base = self.base_lookup(ids)
        payload = self.codec.loads(self.request_body())
        sibling = None
        # a malformed id is a decode error, not an unknown sibling
        sibling_id = parse_attr(self.id_type.column, payload.get(self.id_type.attr_name))
        if sibling_id is not None:
            sibling = self.store.find_by_id(self.model, sibling_id)
        if sibling is None:
            sibling = self.codec.decode_payload(self.model, payload, exclude=self.create_exclude())
            sibling = self.store.save(sibling)
        else:
            crudrouter.log.debug(f"Linking existing {self.model.__name__} {sibling_id} to {self.relationship}")
        self.store.attach(base, self.rel_name, sibling)
        return self.encode(sibling), create_status()

    def update(self, **ids):
        existing = self.lookup(ids)
        sibling = self.decode()
        self.id_type.set_id(sibling, self.id_type.get_id(existing))
        sibling = self.store.save(sibling)
        return self.encode(sibling), HTTPStatus.OK

    def delete(self, **ids):
        base = self.base_lookup(ids)
        sibling = self.find_sibling(base, ids)
        self.store.detach(base, self.rel_name, sibling)
        if self.delete_related:
            self.store.delete(sibling)
        return self.status_only()
