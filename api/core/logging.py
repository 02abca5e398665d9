"""
Process-wide logging setup.

Modules get their loggers with `logging.getLogger(__name__)`; this only wires
the root handler once at startup.
"""

from __future__ import annotations

import logging
import sys

from . import config

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_configured = False


def configure_logging() -> None:
    global _configured
    if _configured:
        return None

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))

    root = logging.getLogger()
    root.setLevel(config.log_level())
    root.addHandler(handler)

    # asyncpg is noisy at DEBUG.
    logging.getLogger("asyncpg").setLevel(logging.WARNING)
    _configured = True
