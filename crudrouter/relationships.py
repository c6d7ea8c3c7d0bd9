# -*- coding: utf-8 -*-
"""
Relationship descriptors: a named navigation from a base model to a related model,
derived from the sqlalchemy relationship property and tagged with its kind.

    MANYTOONE   => PARENT    (Book.user)
    ONETOMANY   => CHILDREN  (User.books)
    MANYTOMANY  => SIBLINGS  (Planet.tags, through the secondary table)
"""
from enum import Enum
from typing import Any, Dict, NamedTuple, Optional, Tuple, Type
from sqlalchemy import inspect as sqla_inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm.interfaces import MANYTOMANY, MANYTOONE, ONETOMANY
from .errors import ConfigurationError


class RelationKind(str, Enum):
    PARENT = "parent"
    CHILDREN = "children"
    SIBLINGS = "siblings"


DIRECTION_KINDS = {MANYTOONE: RelationKind.PARENT, ONETOMANY: RelationKind.CHILDREN, MANYTOMANY: RelationKind.SIBLINGS}


class Relationship(NamedTuple):
    kind: RelationKind
    base: Type[Any]
    related: Type[Any]
    name: str
    # MANYTOMANY secondary table
    through: Optional[Any] = None
    # (related attribute, base attribute) foreign key pairs (CHILDREN only)
    foreign_keys: Tuple[Tuple[str, str], ...] = ()

    def __str__(self):
        return f"{self.base.__name__}.{self.name}"


def resolve_relationships(Model: Type[Any]) -> Dict[str, Any]:
    try:
        mapper = sqla_inspect(Model)
    except NoInspectionAvailable:
        raise ConfigurationError(f"{Model} is not a mapped sqlalchemy class")
    return {rel.key: rel for rel in mapper.relationships}


def _foreign_key_attrs(rel_prop) -> Tuple[Tuple[str, str], ...]:
    """
    :return: (related attribute, base attribute) name pairs of the foreign key columns
    """
    base_mapper = rel_prop.parent
    target_mapper = rel_prop.mapper
    result = []
    for local, remote in rel_prop.local_remote_pairs:
        result.append((target_mapper.get_property_by_column(remote).key, base_mapper.get_property_by_column(local).key))
    return tuple(result)


def describe_relationship(Model: Type[Any], rel_name: str, kind: RelationKind) -> Relationship:
    """
    :param Model: base model
    :param rel_name: name of the relationship attribute on Model
    :param kind: expected kind
    :return: Relationship
    :raises ConfigurationError: when the relationship doesn't exist or is of a different kind
    """
    rels = resolve_relationships(Model)
    rel_prop = rels.get(rel_name)
    if rel_prop is None:
        raise ConfigurationError(f"{Model.__name__} has no relationship '{rel_name}'")

    actual = DIRECTION_KINDS.get(rel_prop.direction)
    if actual is not kind:
        raise ConfigurationError(f"{Model.__name__}.{rel_name} is a {actual.value if actual else rel_prop.direction} relationship, not {kind.value}")

    if kind is RelationKind.PARENT and rel_prop.uselist:
        raise ConfigurationError(f"{Model.__name__}.{rel_name} must be a scalar relationship")
    if kind is not RelationKind.PARENT and not rel_prop.uselist:
        raise ConfigurationError(f"{Model.__name__}.{rel_name} must be a list relationship")

    foreign_keys = _foreign_key_attrs(rel_prop) if kind is RelationKind.CHILDREN else ()
    through = rel_prop.secondary if kind is RelationKind.SIBLINGS else None
    return Relationship(kind, Model, rel_prop.mapper.class_, rel_name, through, foreign_keys)
