"""
Data store: the persistence operations used by the controllers

DataStore defines the interface, SQLAlchemyStore implements it with a
flask_sqlalchemy.SQLAlchemy instance. The store only flushes,
commit and rollback happen at the request boundary (api.http_method_decorator).
"""
from functools import wraps
from typing import Any, List, Optional, Type
import sqlalchemy
from sqlalchemy import select
from sqlalchemy.orm import with_parent
import crudrouter
from .errors import StoreError
from .id_types import get_id_type


class DataStore:
    """
    Persistence interface required by the controllers
    """

    def find_all(self, model: Type[Any]) -> List[Any]:
        raise NotImplementedError

    def find_by_id(self, model: Type[Any], id: Any) -> Optional[Any]:
        raise NotImplementedError

    def save(self, instance: Any) -> Any:
        """
        Insert or update instance
        :return: the persisted instance, with its identifier assigned
        """
        raise NotImplementedError

    def delete(self, instance: Any) -> bool:
        raise NotImplementedError

    def load_related(self, instance: Any, rel_name: str) -> Optional[Any]:
        """
        :return: the instance referenced by a to-one relationship
        """
        raise NotImplementedError

    def find_all_related(self, instance: Any, rel_name: str) -> List[Any]:
        """
        :return: the instances in a to-many relationship
        """
        raise NotImplementedError

    def find_related(self, instance: Any, rel_name: str, id: Any) -> Optional[Any]:
        """
        :return: the instance with identifier `id` if it's in the to-many relationship, None otherwise
        """
        raise NotImplementedError

    def attach(self, instance: Any, rel_name: str, related: Any) -> None:
        raise NotImplementedError

    def detach(self, instance: Any, rel_name: str, related: Any) -> None:
        raise NotImplementedError

    def primary_key(self, instance: Any) -> Any:
        return get_id_type(instance.__class__).get_id(instance)

    def commit(self) -> None:
        """
        Commit the writes of the current request
        """
        raise NotImplementedError

    def rollback(self) -> None:
        raise NotImplementedError


def store_method(fun):
    """
    Convert sqlalchemy exceptions to StoreError
    """

    @wraps(fun)
    def store_wrapper(*args, **kwargs):
        try:
            return fun(*args, **kwargs)
        except sqlalchemy.exc.SQLAlchemyError as exc:
            # Exception may arise when a db constraint has been violated (e.g. duplicate key)
            crudrouter.log.exception(exc)
            raise StoreError(str(exc))

    return store_wrapper


class SQLAlchemyStore(DataStore):
    """
    DataStore implementation on a flask_sqlalchemy session
    """

    def __init__(self, db):
        """
        :param db: flask_sqlalchemy.SQLAlchemy instance (app.extensions["sqlalchemy"])
        """
        self.db = db

    @property
    def session(self):
        return self.db.session

    @store_method
    def find_all(self, model):
        pk_column = getattr(model, get_id_type(model).attr_name)
        return list(self.session.scalars(select(model).order_by(pk_column)))

    @store_method
    def find_by_id(self, model, id):
        id = get_id_type(model).validate_id(id)
        if id is None:
            return None
        return self.session.get(model, id)

    @store_method
    def save(self, instance):
        # merge: an instance decoded from a request body with an existing identifier replaces the stored values
        result = self.session.merge(instance)
        self.session.flush()
        return result

    @store_method
    def delete(self, instance):
        self.session.delete(instance)
        self.session.flush()
        return True

    @store_method
    def load_related(self, instance, rel_name):
        return getattr(instance, rel_name)

    def _related_query(self, instance, rel_name):
        relationship = getattr(instance.__class__, rel_name)
        related = relationship.property.mapper.class_
        pk_column = getattr(related, get_id_type(related).attr_name)
        return related, pk_column, select(related).where(with_parent(instance, relationship))

    @store_method
    def find_all_related(self, instance, rel_name):
        _, pk_column, query = self._related_query(instance, rel_name)
        return list(self.session.scalars(query.order_by(pk_column)))

    @store_method
    def find_related(self, instance, rel_name, id):
        related, pk_column, query = self._related_query(instance, rel_name)
        id = get_id_type(related).validate_id(id)
        return self.session.scalars(query.where(pk_column == id)).first()

    @store_method
    def attach(self, instance, rel_name, related):
        collection = getattr(instance, rel_name)
        if related not in collection:
            collection.append(related)
        self.session.flush()

    @store_method
    def detach(self, instance, rel_name, related):
        getattr(instance, rel_name).remove(related)
        self.session.flush()

    @store_method
    def commit(self):
        self.session.commit()

    def rollback(self):
        self.session.rollback()
