# Identifier handling for the exposed models
#
# The path identifier of a model is derived from its (single column) primary key:
# the column determines the url converter (int or string) and how an id taken from
# the url or from a request body is coerced before it's used in a query.
from functools import lru_cache
from sqlalchemy import inspect as sqla_inspect
from sqlalchemy.exc import NoInspectionAvailable
from .errors import ConfigurationError, NotFoundError


class IdType:
    """
    Primary key information of a mapped class
    """

    def __init__(self, model, column, attr_name):
        self.model = model
        self.column = column
        self.attr_name = attr_name

    @property
    def python_type(self):
        try:
            return self.column.type.python_type
        except NotImplementedError:
            # custom column types don't have to implement python_type
            return str

    @property
    def converter(self):
        """
        :return: the werkzeug url converter for the id, "int" or "string"
        """
        return "int" if self.python_type is int else "string"

    def validate_id(self, id):
        """
        Coerce an id to the primary key python type
        an id that can't be coerced can't exist in the store
        """
        if id is None or isinstance(id, self.python_type):
            return id
        try:
            return self.python_type(id)
        except (TypeError, ValueError):
            raise NotFoundError(f'Invalid "{self.model.__name__}" id "{id}"')

    def get_id(self, instance):
        """
        :return: the primary key value of instance
        """
        return getattr(instance, self.attr_name, None)

    def set_id(self, instance, id):
        setattr(instance, self.attr_name, self.validate_id(id))


@lru_cache(maxsize=128)
def get_id_type(model) -> IdType:
    """
    :param model: sqlalchemy mapped class
    :return: IdType for the model
    """
    try:
        mapper = sqla_inspect(model)
    except NoInspectionAvailable:
        raise ConfigurationError(f"{model} is not a mapped sqlalchemy class")

    primary_key = mapper.primary_key
    if len(primary_key) != 1:
        raise ConfigurationError(f"{model.__name__} must have exactly one primary key column, found {len(primary_key)}")
    column = primary_key[0]
    attr_name = mapper.get_property_by_column(column).key
    return IdType(model, column, attr_name)
