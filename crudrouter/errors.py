# Exception Handlers
#
# The application loglevel determines the level of detail shown to the user.
# If set to debug, too much sensitive info might be shown !
#
# The exceptions will be caught in http_method_decorator and formatted, for example:
# {
#      "errors": [ {"detail": "Not Found: Invalid Todo id 3"} ]
# }
#
# ConfigurationError is raised while the routes are being registered and is never
# caught by the http_method_decorator: a broken route table must abort startup.
#
from http import HTTPStatus
from werkzeug.exceptions import NotFound
from sqlalchemy.exc import DontWrapMixin
import crudrouter
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class CrudError(Exception, DontWrapMixin):
    """
    Superclass for the errors that translate to an http error response
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = ""


class NotFoundError(CrudError, NotFound):
    """
    This exception is raised when an item was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    message = "Not Found: "

    def __init__(self, message="", status_code=HTTPStatus.NOT_FOUND.value):
        """
        :param message: Message to be returned in the (json) body
        :param status_code: HTTP Status code
        """
        NotFound.__init__(self, description=message)
        self.status_code = status_code
        crudrouter.log.info("Not found: %s", message)
        if is_debug():
            self.message += message
        else:
            self.message += HIDDEN_LOG


class DecodeError(CrudError):
    """
    This exception is raised when a request body can't be decoded into a model (client side input)
    Always send back the message to the client in the response
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    message = "Decode Error: "

    def __init__(self, message="", status_code=HTTPStatus.BAD_REQUEST.value):
        CrudError.__init__(self, message)
        self.status_code = status_code
        crudrouter.log.warning("DecodeError: %s", message)
        self.message += message


class StoreError(CrudError):
    """
    This exception is raised when the data store failed, e.g. a violated db constraint
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    message = "Store Error: "

    def __init__(self, message="", status_code=HTTPStatus.INTERNAL_SERVER_ERROR.value):
        CrudError.__init__(self, message)
        self.status_code = status_code
        crudrouter.log.error("StoreError: %s", message)
        if is_debug():
            self.message += str(message)
        else:
            self.message += HIDDEN_LOG


class ConfigurationError(Exception):
    """
    This exception is raised when the routes can't be registered,
    e.g. a duplicate route or a relationship of the wrong kind
    """
