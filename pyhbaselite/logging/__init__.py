from os import environ
from logging import Formatter
from logging import StreamHandler

JSON_LOGS_ENV = "PYHBASELITE_JSON_LOGS"
LOG_FORMAT = "%(asctime)s %(message)s"
JSON_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%d %I:%M:%S %p"


def json_logs_enabled() -> bool:
    return environ.get(JSON_LOGS_ENV, "").lower() in ("1", "true", "yes")


def get_handler(stream=None) -> StreamHandler:
    """Stream handler with the plain or, when enabled, the JSON formatter."""
    handler = StreamHandler(stream)
    if json_logs_enabled():
        from .jsonformatter import JsonFormatter

        handler.setFormatter(JsonFormatter(JSON_LOG_FORMAT, datefmt=LOG_DATEFMT))
    else:
        handler.setFormatter(Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
    return handler
