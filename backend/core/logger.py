# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20260206v1
# ---------------------------------------------------------------------------
"""
Centralised logging configuration.

Levels, handlers, rotation and format are declared in  etc/logging.conf.
The file uses a ``%(log_file)s`` placeholder which is swapped for the real
absolute path before the text is handed to ``logging.config.fileConfig``.

Import the root application logger:
    from core.logger import logger

or a child logger for one feature area (inherits the handlers):
    from core.logger import get_logger
    log = get_logger("vaults")          # → "vaultshare.vaults"
"""

import configparser
import logging
import logging.config
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
# project root: backend/core/logger.py  →  ../../  →  vaultshare/
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_LOG_DIR      = _PROJECT_ROOT / "log"
_LOG_FILE     = _LOG_DIR / "app.log"
_LOGGING_CONF = _PROJECT_ROOT / "etc" / "logging.conf"

LOGGER_NAME = "vaultshare"


def _configure() -> None:
    """Apply etc/logging.conf, or fall back to a console handler if absent."""
    if not _LOGGING_CONF.is_file():
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        )
        return

    # The rotating file handler opens its file eagerly
    _LOG_DIR.mkdir(exist_ok=True)

    raw = _LOGGING_CONF.read_text(encoding="utf-8")
    raw = raw.replace("%(log_file)s", _LOG_FILE.as_posix())

    # RawConfigParser: the format strings contain %(asctime)s etc. which a
    # plain ConfigParser would try to interpolate.
    parser = configparser.RawConfigParser()
    parser.read_string(raw)

    logging.config.fileConfig(parser, disable_existing_loggers=False)


_configure()

# ---------------------------------------------------------------------------
# Module-level handles
# ---------------------------------------------------------------------------
logger = logging.getLogger(LOGGER_NAME)


def get_logger(area: str) -> logging.Logger:
    """Return the ``vaultshare.<area>`` child logger."""
    return logger.getChild(area)
