"""
Logging setup.

Every module logs through a named stdlib logger sharing one format.
"""

import logging
import sys

from statussheet.core.config import get_settings

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logger(name: str) -> logging.Logger:
    """Return a logger with a single stream handler attached."""
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(_FORMAT))
        log.addHandler(handler)
        log.propagate = False
    log.setLevel(logging.DEBUG if get_settings().DEBUG else logging.INFO)
    return log


logger = setup_logger("statussheet")
