"""Logger factory.

Every module grabs its logger once at import time::

    from linkmedic.log import get_logger

    logger = get_logger(__name__)

All loggers hang off the ``linkmedic`` root logger, which gets exactly one
console handler the first time any logger is requested.
"""

from __future__ import annotations

import logging

from linkmedic.config import settings

_ROOT_NAME = "linkmedic"
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_root() -> logging.Logger:
    root = logging.getLogger(_ROOT_NAME)
    if root.handlers:
        return root

    root.setLevel(getattr(logging, settings.log_level, logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``linkmedic`` hierarchy.

    Modules outside the package (e.g. ``cli.*``) are re-parented so they share
    the same handler and level.
    """
    _configure_root()
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + "."):
        name = f"{_ROOT_NAME}.{name}"
    return logging.getLogger(name)
