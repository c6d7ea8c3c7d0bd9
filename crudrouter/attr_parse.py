import datetime
import crudrouter
import sqlalchemy
from .errors import DecodeError


def _parse_datetime(attr_val):
    date_str = str(attr_val)
    try:
        # isoformat, also covers str(datetime.datetime.now()) => "%Y-%m-%d %H:%M:%S.%f"
        return datetime.datetime.fromisoformat(date_str)
    except ValueError:
        pass
    if "." in date_str:
        return datetime.datetime.strptime(date_str, "%Y-%m-%d %H:%M:%S.%f")
    # JS datepicker format
    return datetime.datetime.strptime(date_str, "%Y-%m-%d %H:%M:%S")


def _parse_time(attr_val):
    time_str = str(attr_val)
    try:
        return datetime.time.fromisoformat(time_str)
    except ValueError:
        pass
    if "." in time_str:
        return datetime.datetime.strptime(time_str, "%H:%M:%S.%f").time()
    return datetime.datetime.strptime(time_str, "%H:%M:%S").time()


def parse_attr(column, attr_val):
    """
    Parse the supplied `attr_val` so it can be saved in the SQLAlchemy `column`

    :param column: SQLAlchemy column
    :param attr_val: decoded json value
    :return: processed value
    :raises DecodeError: if the value can't be converted to the column type
    """
    if attr_val is None:
        return attr_val

    try:
        python_type = column.type.python_type
    except NotImplementedError as exc:
        """
        This happens when a custom type has been implemented, in which case the user/dev should know how to handle it:
        => simply return the attr_val for user-defined classes
        """
        crudrouter.log.debug(exc)
        return attr_val

    # skip type coercion on JSON columns, since they could be anything
    if isinstance(column.type, sqlalchemy.types.JSON):
        return attr_val

    if isinstance(attr_val, python_type) and not (python_type is int and isinstance(attr_val, bool)):
        return attr_val

    try:
        if python_type == datetime.datetime:
            attr_val = _parse_datetime(attr_val)
        elif python_type == datetime.date:
            attr_val = datetime.date.fromisoformat(str(attr_val))
        elif python_type == datetime.time:
            attr_val = _parse_time(attr_val)
        elif python_type is bool:
            if not isinstance(attr_val, (int, str)) or str(attr_val).lower() not in ("0", "1", "true", "false"):
                raise ValueError(f"not a boolean: {attr_val!r}")
            attr_val = str(attr_val).lower() in ("1", "true")
        elif isinstance(attr_val, (dict, list)):
            # json objects don't convert to scalar column types
            raise TypeError(f"{type(attr_val).__name__} for {python_type.__name__}")
        elif python_type is int and isinstance(attr_val, float) and not attr_val.is_integer():
            raise ValueError("fractional part would be lost")
        else:
            attr_val = python_type(attr_val)
    except (NotImplementedError, ValueError, TypeError) as exc:
        raise DecodeError(f'Invalid value "{attr_val}" for {column.name}: {exc}')

    return attr_val
