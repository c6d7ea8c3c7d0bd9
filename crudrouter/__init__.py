# flake8: noqa: F401
#
# crud_init has to be imported first: the other modules access crudrouter.log and crudrouter.CRUD
#
from .crud_init import CRUD, log
from .errors import CrudError, NotFoundError, DecodeError, StoreError, ConfigurationError
from .operations import Operation, Only, Except
from .paths import IdPlaceholder, default_segment, parse_path, resolve_path, compose_path, to_rule
from .relationships import RelationKind, Relationship, describe_relationship
from .codec import JSONCodec
from .json_encoder import CrudJSONEncoder
from .store import DataStore, SQLAlchemyStore
from .controller import Controller, ResourceController
from .relation_controllers import ParentController, ChildrenController, SiblingsController
from .api import CrudApi
from .__about__ import __version__, __description__

__all__ = (
    "__version__",
    "__description__",
    #
    "CrudApi",
    "CRUD",
    # operations:
    "Operation",
    "Only",
    "Except",
    # paths:
    "IdPlaceholder",
    "default_segment",
    "parse_path",
    "resolve_path",
    "compose_path",
    "to_rule",
    # controllers:
    "Controller",
    "ResourceController",
    "ParentController",
    "ChildrenController",
    "SiblingsController",
    "RelationKind",
    "Relationship",
    "describe_relationship",
    # persistence and encoding:
    "DataStore",
    "SQLAlchemyStore",
    "JSONCodec",
    "CrudJSONEncoder",
    # Errors:
    "CrudError",
    "NotFoundError",
    "DecodeError",
    "StoreError",
    "ConfigurationError",
)
