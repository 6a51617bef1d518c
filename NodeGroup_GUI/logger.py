"""Logging setup.

Modules log through the shared ``logger`` instance::

    from NodeGroup_GUI.logger import logger
"""

import logging
import sys

from NodeGroup_GUI.config import settings

LOGGER_NAME = "nodegroup"


def _ensure_root_handler(level: int) -> None:
    """Attach a console handler to the root logger once."""
    root = logging.getLogger()
    if not root.handlers:
        fmt = logging.Formatter(
            fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.NOTSET)
        handler.setFormatter(fmt)
        root.addHandler(handler)
    root.setLevel(level)


def configure_logger(level_name: str | None = None) -> logging.Logger:
    """Configure and return the application logger.

    Safe to call repeatedly; the CLI calls it again with ``--log-level``.
    """
    level_name = (level_name or settings.log_level or "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    _ensure_root_handler(level)

    log = logging.getLogger(LOGGER_NAME)
    for h in list(log.handlers):
        if isinstance(h, logging.NullHandler):
            log.removeHandler(h)
    log.setLevel(level)
    log.propagate = True
    log.disabled = False
    return log


logger = configure_logger()
