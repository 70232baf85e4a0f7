import logging
import os

from erp.config import settings

# Logger name
LOG_NAME = os.getenv("APP_LOGGER_NAME", "textile_erp")

# Create logger
logger = logging.getLogger(LOG_NAME)
logger.setLevel(settings.LOG_LEVEL.upper())

# Log format with ISO-like timestamp including milliseconds
LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(filename)s - %(funcName)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Formatter
formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

# Console handler
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Avoid duplicate logs when imported in multiple modules
logger.propagate = False
