"""
Request body decoding and model encoding

JSONCodec decodes a json request body into a (transient) instance of a
sqlalchemy model and encodes instances as a dict of their column attributes.
Only the mapped columns are used, other keys in the body are ignored.
"""
import json
from typing import Any, Dict, Iterable, Type
from sqlalchemy import inspect as sqla_inspect
import crudrouter
from .attr_parse import parse_attr
from .errors import DecodeError
from .id_types import get_id_type


class JSONCodec:
    """
    Codec for json request bodies
    """

    def decode(self, model: Type[Any], raw, exclude: Iterable[str] = ()) -> Any:
        """
        :param model: sqlalchemy model class
        :param raw: request body (bytes or str)
        :param exclude: attribute names that are not read from the body,
                        these are set by the caller (e.g. foreign keys of a scoped relationship)
        :return: new `model` instance holding the decoded attributes
        :raises DecodeError: malformed json or values that don't fit the model
        """
        return self.decode_payload(model, self.loads(raw), exclude)

    def decode_payload(self, model: Type[Any], payload: Dict[str, Any], exclude: Iterable[str] = ()) -> Any:
        """
        :param payload: json object, see `loads`
        :return: new `model` instance
        """
        attributes = self.decode_attributes(model, payload, exclude)
        try:
            return model(**attributes)
        except (TypeError, ValueError) as exc:
            # raised by the model constructor or by sqlalchemy validators
            raise DecodeError(f"Can't create {model.__name__}: {exc}")

    @staticmethod
    def loads(raw) -> Dict[str, Any]:
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise DecodeError(f"Invalid UTF-8 in request body: {exc}")
        if not raw or not raw.strip():
            raise DecodeError("Empty request body")
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise DecodeError(f"Invalid JSON: {exc}")
        if not isinstance(payload, dict):
            raise DecodeError(f"Invalid JSON Payload, expected an object: {payload}")
        return payload

    @staticmethod
    def decode_attributes(model: Type[Any], payload: Dict[str, Any], exclude: Iterable[str] = ()) -> Dict[str, Any]:
        """
        :return: dict with the parsed column values found in payload
        """
        exclude = set(exclude)
        pk_name = get_id_type(model).attr_name
        attributes = {}
        missing = []
        for prop in sqla_inspect(model).column_attrs:
            name = prop.key
            column = prop.columns[0]
            if name in exclude:
                continue
            required = name != pk_name and not column.nullable and column.default is None and column.server_default is None
            if name in payload and not (required and payload[name] is None):
                attributes[name] = parse_attr(column, payload[name])
            elif required:
                # an explicit null is as good as missing
                missing.append(name)

        if missing:
            raise DecodeError(f"Missing {model.__name__} attributes: {', '.join(missing)}")

        ignored = set(payload) - set(attributes) - exclude
        if ignored:
            crudrouter.log.debug(f"Ignoring {model.__name__} attributes {sorted(ignored)}")
        return attributes

    @staticmethod
    def encode(instance) -> Dict[str, Any]:
        """
        Create a dictionary with the instance column attributes,
        the attributes listed in the `exclude_attrs` class attribute are left out (public representation)

        :return: dict, serialized by CrudJSONEncoder
        """
        exclude_attrs = getattr(instance.__class__, "exclude_attrs", ())
        return {
            prop.key: getattr(instance, prop.key)
            for prop in sqla_inspect(instance.__class__).column_attrs
            if prop.key not in exclude_attrs
        }
