"""
entrypoints.py — Serverless Function Entry Points

AWS Lambda (API Gateway proxy integration):
    liters_service.entrypoints.get_user_liters_handler
    liters_service.entrypoints.set_user_liters_handler

Function-style platforms that pass a flat parameter mapping
(e.g. DigitalOcean Functions web actions):
    liters_service.entrypoints.get_user_liters_main
    liters_service.entrypoints.set_user_liters_main

Configuration and logging are set up on the first invocation of the process and
reused while the runtime stays warm.
"""

import json
import logging
from functools import lru_cache

from .config import LitersConfig
from .exceptions import ConfigurationError
from .logging_config import setup_logging
from .responses import READ_METHODS, WRITE_METHODS, build_error_response
from .workflow import GetUserLitersHandler, SetUserLitersHandler

log = logging.getLogger(__name__)


@lru_cache(maxsize=None)
def load_config() -> LitersConfig:
    config = LitersConfig.from_env()
    setup_logging(config.log_level, config.log_file)
    return config


def get_user_liters_handler(event, context):
    try:
        config = load_config()
    except ConfigurationError as e:
        log.critical(f"get-user-liters cannot start: {e}")
        return build_error_response(500, "Internal server error", READ_METHODS)
    return GetUserLitersHandler(config).handle(event)


def set_user_liters_handler(event, context):
    try:
        config = load_config()
    except ConfigurationError as e:
        log.critical(f"set-user-liters cannot start: {e}")
        return build_error_response(500, "Internal server error", WRITE_METHODS)
    return SetUserLitersHandler(config).handle(event)


def args_to_event(args: dict, default_method: str) -> dict:
    """
    Converts a flat function-style argument mapping into a proxy envelope.

    Keys starting with '__ow_' are platform metadata; the remaining keys are the
    request parameters, with integer ids passed on as strings. They are offered
    both as query parameters and as a JSON body, so the regular resolution order
    applies.

    Args:
        args (dict): Arguments as received by the function.
        default_method (str): Method assumed when the platform does not pass one.

    Returns:
        dict: An envelope accepted by the handlers.
    """
    params = {
        key: str(value) if isinstance(value, int) and not isinstance(value, bool) else value
        for key, value in args.items()
        if not key.startswith("__ow_")
    }
    method = args.get("__ow_method") or default_method
    return {
        "httpMethod": method.upper(),
        "path": args.get("__ow_path", ""),
        "headers": args.get("__ow_headers") or {},
        "queryStringParameters": {key: value for key, value in params.items() if isinstance(value, str)},
        "pathParameters": None,
        "body": json.dumps(params) if params else None,
    }


def get_user_liters_main(args):
    return get_user_liters_handler(args_to_event(args, "GET"), None)


def set_user_liters_main(args):
    return set_user_liters_handler(args_to_event(args, "POST"), None)
