# tgzpack/logger.py
# tgzpack: Packages a source tree and its install script into a delivery archive.
# Copyright (C) 2025 Dank A. Saurus

# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU General Public License for more details.

# You should have received a copy of the GNU General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.


import logging
import sys
from logging.handlers import RotatingFileHandler

from . import config


def setup_logger():
    """Configures and returns a project-wide logger."""
    # Create logger object
    logger = logging.getLogger("tgzpack")
    logger.setLevel(logging.DEBUG)

    # Prevent propagation to the root logger to avoid duplicate messages
    logger.propagate = False

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Console handler for operator-facing info/warnings/errors
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)

    # The log directory must exist before the file handler opens its file.
    try:
        log_dir = config.ROTATING_LOG_FILE.parent
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        # The logger isn't configured yet, so report straight to stderr.
        print(
            f"CRITICAL: Could not create log directory {log_dir}: {e}", file=sys.stderr
        )
        if not logger.handlers:
            logger.addHandler(console_handler)
        return logger

    # Rotates when the log reaches 1MB, keeping up to 5 backup logs.
    file_handler = RotatingFileHandler(
        config.ROTATING_LOG_FILE, maxBytes=1024 * 1024, backupCount=5, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    if not logger.handlers:
        logger.addHandler(console_handler)
        logger.addHandler(file_handler)

    return logger


def set_console_level(level: str | int) -> None:
    """Changes the threshold of the stderr handler, leaving the log file untouched."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            log.warning("Unknown log level '%s'; keeping the current level.", level)
            return
        level = resolved
    for handler in log.handlers:
        if not isinstance(handler, RotatingFileHandler):
            handler.setLevel(level)


# Singleton logger instance to be imported by other modules
log = setup_logger()
