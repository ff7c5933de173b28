"""Mini README: Logging helpers shared by the ledger core and the console.

Structure:
    * get_logger - module logger factory; installs the root handler on first use.
    * configure_root_logger - sets the root level (name or number).

Log lines go to stderr so the console's JSON reports on stdout stay parseable.
Level names are validated by ``FreightbooksSettings``; this module only applies
them.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, Union

LEDGER_LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"

_handler: Optional[logging.Handler] = None


def configure_root_logger(level: Union[int, str] = logging.INFO) -> None:
    """Install the stderr handler once and apply ``level`` on every call."""

    global _handler
    root_logger = logging.getLogger()
    root_logger.setLevel(level.strip().upper() if isinstance(level, str) else level)
    if _handler is not None:
        return

    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter(LEDGER_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(_handler)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if _handler is None:
        configure_root_logger()
    return logging.getLogger(name)
