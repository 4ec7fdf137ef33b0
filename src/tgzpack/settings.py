# tgzpack/settings.py
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

import json
from typing import Any

from . import config, utils, validation
from .logger import log

VALID_COMPRESSIONS = ("gzip", "none")


def _get_default_settings() -> dict[str, Any]:
    """Returns a dictionary of the default application settings."""
    return {
        # --- Source Tree ---
        "install_script_name": "INSTALL.sh",
        "backup_marker": "# >>> tgzpack backup list >>>",
        # --- Archives ---
        "source_archive_name": "source.tgz",
        "compression": "gzip",
        # --- Diagnostics ---
        "log_level": "INFO",
    }


def _load_settings() -> dict[str, Any]:
    """Loads settings from the JSON file, merging them with defaults."""
    defaults = _get_default_settings()
    if not config.SETTINGS_FILE.exists():
        return defaults
    try:
        with open(config.SETTINGS_FILE, encoding="utf-8") as f:
            user_settings = json.load(f)
        defaults.update(user_settings)
        return defaults
    except (OSError, json.JSONDecodeError) as e:
        log.warning("Could not load settings file: %s. Using defaults.", e)
        return defaults


def save_setting(key: str, value: str) -> None:
    """Saves a single setting to the JSON file after type conversion."""
    default_settings = _get_default_settings()
    if key not in default_settings:
        print(f"{utils.SYSTEM_MSG}--> Unknown setting: '{key}'.{utils.RESET_COLOR}")
        return

    current_settings = _load_settings()
    converted_value: Any = value

    try:
        if key == "compression" and value not in VALID_COMPRESSIONS:
            raise ValueError(
                f"Invalid compression '{value}'. Use one of: {', '.join(VALID_COMPRESSIONS)}."
            )
        if key == "source_archive_name" and not validation.validate_archive_name(value):
            raise ValueError(
                f"Invalid archive name '{value}'. Use a plain file name ending in "
                f"'{config.ARCHIVE_EXTENSION}'."
            )
        if key == "log_level":
            converted_value = value.upper()
        if not str(converted_value).strip():
            raise ValueError(f"Setting '{key}' cannot be empty.")
    except ValueError as e:
        print(f"{utils.SYSTEM_MSG}--> Error: {e}{utils.RESET_COLOR}")
        return

    current_settings[key] = converted_value

    user_settings_to_save = {
        k: v for k, v in current_settings.items() if k in default_settings
    }

    try:
        utils.ensure_dir_exists(config.CONFIG_DIR)
        with open(config.SETTINGS_FILE, "w", encoding="utf-8") as f:
            json.dump(user_settings_to_save, f, indent=2)
        print(
            f"{utils.SYSTEM_MSG}--> Setting '{key}' updated to '{converted_value}'.{utils.RESET_COLOR}"
        )
        settings[key] = converted_value
    except OSError as e:
        log.error("Failed to save settings: %s", e)


settings: dict[str, Any] = _load_settings()
