# tgzpack/config.py
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


import os
from pathlib import Path

# Base directory for user-specific configuration files.
CONFIG_DIR = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config')) / 'tgzpack'

# Base directory for all application-generated data files.
DATA_DIR = Path(os.environ.get('XDG_DATA_HOME', Path.home() / '.local/share')) / 'tgzpack'

# --- Log Directory (under DATA_DIR) ---
LOG_DIRECTORY = DATA_DIR / "logs"

# --- Specific File Paths ---
SETTINGS_FILE = CONFIG_DIR / "settings.json"
DOTENV_FILE = CONFIG_DIR / ".env"
ROTATING_LOG_FILE = LOG_DIRECTORY / "tgzpack.log"

# --- Archive Layout ---
# Every file ending in this extension is treated as a stale artifact by the collector.
ARCHIVE_EXTENSION = ".tgz"
# Staging directories for outputs without the archive extension get this suffix.
STAGING_DIR_SUFFIX = ".d"
# File contents are streamed into the archive in chunks of this size.
ARCHIVE_CHUNK_SIZE = 8 * 1024

# --- Environment Overrides ---
LOG_LEVEL_ENV_VAR = "TGZPACK_LOG_LEVEL"

# --- Process Exit Codes ---
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_OUTPUT = 3
EXIT_FILESYSTEM = 4
EXIT_ARCHIVE = 5
EXIT_SCRIPT_PATCH = 6
EXIT_MOVE_ARCHIVE = 7
EXIT_MOVE_SCRIPT = 8
