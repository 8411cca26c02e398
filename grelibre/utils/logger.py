"""
Logging configuration.

Imported once by the application entrypoint; modules then use
``logging.getLogger(__name__)``.
"""

import logging
import sys

from grelibre.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format=LOG_FORMAT,
    stream=sys.stdout,
)

# httpx logs every request at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)
