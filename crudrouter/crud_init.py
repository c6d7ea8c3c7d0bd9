import logging
import os
import sys


class CRUD:
    """Default crudrouter settings

    Settings are looked up in the flask app.config first, then here, then in the
    environment (cfr. config.get_config). Keyword arguments passed to `CrudApi`
    overwrite the class attributes.
    """

    # prefix prepended to all generated urls, e.g. "/api"
    CRUD_URL_PREFIX = ""
    # suffix of the url path parameter, eg. Todo => /todo/<int:todo_id>
    CRUD_ID_SUFFIX = "_id"
    # status code returned after a successful POST
    CRUD_CREATE_STATUS = 200
    # crudrouter log level, overrides the DEBUG environment variable
    CRUD_LOGLEVEL = None

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        The webserver will catch stderr so we log everything to sys.stderr
        """
        log = logging.getLogger("crudrouter")
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# logging initialization
#
try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = CRUD.init_logging(LOGLEVEL)
