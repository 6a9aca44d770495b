# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Centralised logging configuration.

All log settings (levels, rotation, format …) live in  etc/logging.conf.
This module resolves the log-file path, patches it into the config text, and
applies it via the standard-library fileConfig loader.

``DAIRYFARM_LOG_DIR`` and ``DAIRYFARM_LOGGING_CONF`` override the default
locations (useful for containers and test runs).

Import the ready-made logger anywhere:
    from core.logger import logger
"""

import configparser
import logging
import logging.config
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
# project root: backend/core/logger.py  →  ../../  →  project/
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_LOG_DIR      = Path(os.environ.get("DAIRYFARM_LOG_DIR", _PROJECT_ROOT / "log"))
_LOG_FILE     = _LOG_DIR / "app.log"
_LOGGING_CONF = Path(
    os.environ.get("DAIRYFARM_LOGGING_CONF", _PROJECT_ROOT / "etc" / "logging.conf")
)


def _configure() -> None:
    """
    Apply logging.conf.  The file uses %(log_file)s as a placeholder; the raw
    text is patched with the real absolute path and fed to fileConfig via a
    RawConfigParser (the format strings contain %(asctime)s etc. which a
    plain ConfigParser would try to interpolate).
    """
    if not _LOGGING_CONF.is_file():
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        )
        return

    _LOG_DIR.mkdir(parents=True, exist_ok=True)

    raw = _LOGGING_CONF.read_text(encoding="utf-8")
    raw = raw.replace("%(log_file)s", str(_LOG_FILE))

    parser = configparser.RawConfigParser()
    parser.read_string(raw)
    logging.config.fileConfig(parser, disable_existing_loggers=False)


_configure()

# ---------------------------------------------------------------------------
# Module-level handle
# ---------------------------------------------------------------------------
logger = logging.getLogger("dairyfarm")
