"""
Path building: url paths are tuples of tokens, a token is either a literal
path segment or an IdPlaceholder that will be rendered as a werkzeug url variable.

    ("user", IdPlaceholder("user_id", "int"), "book")  =>  /user/<int:user_id>/book

Explicit paths are written as strings, "/" separates the segments and ":" marks a
placeholder, optionally prefixed with a converter:

    "school/:int:school_id/staff"
"""
import re
from itertools import chain
from typing import Iterable, NamedTuple, Optional, Tuple, Union
from .config import get_config
from .errors import ConfigurationError
from .id_types import get_id_type

_FIRST_CAP_RE = re.compile(r"(.)([A-Z][a-z]+)")
_ALL_CAP_RE = re.compile(r"([a-z0-9])([A-Z])")


class IdPlaceholder(NamedTuple):
    """
    Path token for an identifier
    """

    name: str
    converter: str = "string"

    def __str__(self):
        return f"<{self.converter}:{self.name}>"


Token = Union[str, IdPlaceholder]
Path = Tuple[Token, ...]
PathOverride = Optional[Union[str, Iterable[Token]]]


def default_segment(type_name: str) -> str:
    """
    Convert a type name to lower snake_case, e.g. SchoolTeacher => school_teacher
    """
    if not type_name:
        raise ConfigurationError("Can't create a path segment for an empty type name")
    result = _FIRST_CAP_RE.sub(r"\1_\2", type_name)
    return _ALL_CAP_RE.sub(r"\1_\2", result).lower()


def parse_path(path: str) -> Path:
    """
    Split a path string into tokens
    """
    tokens = []
    for part in path.split("/"):
        if not part:
            continue
        if part.startswith(":"):
            converter, _, name = part[1:].rpartition(":")
            if not name:
                raise ConfigurationError(f"Invalid placeholder '{part}' in '{path}'")
            tokens.append(IdPlaceholder(name, converter or "string"))
        else:
            tokens.append(part)
    return tuple(tokens)


def resolve_path(override: PathOverride, type_name: str) -> Path:
    """
    :param override: explicit path, used verbatim when supplied
    :param type_name: name of the type, used when there's no override
    :return: Path
    """
    if not override:
        return (default_segment(type_name),)
    if isinstance(override, str):
        return parse_path(override)
    tokens = []
    for item in override:
        if isinstance(item, IdPlaceholder):
            tokens.append(item)
        else:
            tokens.extend(parse_path(item))
    return tuple(tokens)


def compose_path(*segments: Iterable[Token]) -> Path:
    return tuple(chain.from_iterable(segments))


def placeholder_names(path: Path):
    return [token.name for token in path if isinstance(token, IdPlaceholder)]


def id_placeholder(model, base_path: Path = ()) -> IdPlaceholder:
    """
    Create the identifier placeholder for model, e.g. Todo => <int:todo_id>
    A counter is appended to the name when base_path already holds it (self referencing relationships)
    """
    suffix = get_config("CRUD_ID_SUFFIX") or "_id"
    name = default_segment(model.__name__) + suffix
    taken = placeholder_names(base_path)
    candidate = name
    counter = 1
    while candidate in taken:
        counter += 1
        candidate = f"{name}{counter}"
    return IdPlaceholder(candidate, get_id_type(model).converter)


def to_rule(path: Path, prefix: str = "") -> str:
    """
    :return: werkzeug url rule string
    """
    names = placeholder_names(path)
    if len(names) != len(set(names)):
        raise ConfigurationError(f"Duplicate placeholder names in {path}")
    return _join(path, prefix)


def route_signature(path: Path, prefix: str = "") -> str:
    """
    :return: the url rule with anonymous placeholders, rules with the same signature match the same urls
    """
    anonymous = tuple(IdPlaceholder("_", token.converter) if isinstance(token, IdPlaceholder) else token for token in path)
    return _join(anonymous, prefix)


def _join(path: Path, prefix: str) -> str:
    rule = "/".join(str(token) for token in path)
    prefix = (prefix or "").strip("/")
    if prefix:
        rule = f"{prefix}/{rule}" if rule else prefix
    return "/" + rule
