# crudrouter to json encoding

import datetime
import decimal
import json
from uuid import UUID
import crudrouter
from .config import is_debug


class CrudJSONEncoder(json.JSONEncoder):
    """
    JSON encoding for the types stored in sqlalchemy columns
    installed as the flask-restful json encoder by CrudApi
    """

    # pylint: disable=too-many-return-statements,method-hidden
    def default(self, obj):
        """
        override the default json encoding
        :param obj: object to be encoded
        :return: encoded/serialized object
        """
        if isinstance(obj, datetime.timedelta):
            return str(obj)
        if isinstance(obj, datetime.datetime):
            return obj.isoformat(" ")
        if isinstance(obj, (datetime.date, datetime.time)):
            return obj.isoformat()
        if isinstance(obj, set):
            return list(obj)
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, decimal.Decimal):
            return float(obj)
        if isinstance(obj, bytes):
            if obj == b"":
                return ""
            crudrouter.log.debug("CrudJSONEncoder: serializing bytes obj")
            return obj.hex()

        # We shouldn't get here in a normal setup: the codec only encodes column values
        if not is_debug():  # pragma: no cover
            crudrouter.log.warning(f'JSON Encoding Error: Unknown object type "{type(obj)}" for {obj}')
            return {"error": "CrudJSONEncoder invalid object"}

        return str(obj)
