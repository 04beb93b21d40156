from os import environ
from logging import getLogger

LOGGER_NAME = "pyhbaselite"
INFO_PRIORITY = 25

__version__ = "0.1.0"


# create logger instance
logger = getLogger(LOGGER_NAME)
log_level = int(environ.get("PYHBASELITE_LOG_LEVEL", INFO_PRIORITY))
logger.setLevel(log_level)
