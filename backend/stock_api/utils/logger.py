import logging
import sys
from logging.handlers import RotatingFileHandler

from ..config.settings import settings

# ---------------------------------------------------
# Application logger
# ---------------------------------------------------
log = logging.getLogger("StockApiBackend")
log.setLevel(logging.DEBUG)

# ---------------------------------------------------
# Formatting
# ---------------------------------------------------
console_format = logging.Formatter(
    "[%(asctime)s] [%(levelname)s] %(message)s",
    "%Y-%m-%d %H:%M:%S"
)

file_format = logging.Formatter(
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    "%Y-%m-%d %H:%M:%S"
)

# ---------------------------------------------------
# Console Handler
# ---------------------------------------------------
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(settings.LOG_LEVEL.upper())
console_handler.setFormatter(console_format)
log.addHandler(console_handler)

# ---------------------------------------------------
# File Logging (enabled by LOG_FILE)
# ---------------------------------------------------
if settings.LOG_FILE:
    file_handler = RotatingFileHandler(
        settings.LOG_FILE,
        maxBytes=5_000_000,  # 5 MB
        backupCount=3
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_format)
    log.addHandler(file_handler)

log.propagate = False
