# Configuration settings should be set in app.config
# get_config falls back to the CRUD class attributes and the environment
import os
import logging
from flask import current_app
import crudrouter
from typing import Optional, Union


def get_config(option: str) -> Optional[Union[bool, int, str]]:
    """Retrieve a configuration parameter from the app
    :param option: configuration parameter
    :return: configuration value
    """
    try:
        result = current_app.config[option]
    except (KeyError, RuntimeError):
        # RuntimeError: working outside of the application context (route registration)
        result = getattr(crudrouter.CRUD, option, os.environ.get(option, None))
    return result


def is_debug() -> bool:
    """
    We use the loglevel to check whether we're running in debug mode
    :return: whether the app is in debug mode
    """
    return crudrouter.log.getEffectiveLevel() < logging.INFO
