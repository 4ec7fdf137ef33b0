# tgzpack/utils.py
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
import shutil
import sys
from pathlib import Path

from . import errors
from .logger import log

# ANSI colours for operator-facing console messages.
SYSTEM_MSG = "\033[93m"
SUCCESS_MSG = "\033[92m"
ERROR_MSG = "\033[91m"
RESET_COLOR = "\033[0m"


def ensure_dir_exists(directory: Path):
    """Creates a directory if it doesn't already exist."""
    try:
        os.makedirs(directory, exist_ok=True)
    except OSError as e:
        print(f"Error: Could not create directory '{directory}': {e}", file=sys.stderr)
        sys.exit(1)


def remove_path(path: str | os.PathLike) -> bool:
    """
    Deletes a file or a directory tree.
    Returns False if nothing existed at the path; "not found" is not an error.
    Raises FilesystemError for any other failure.
    """
    path = os.fspath(path)
    try:
        os.remove(path)
        log.debug("Removed file %s", path)
        return True
    except FileNotFoundError:
        log.debug("Nothing to remove at %s", path)
        return False
    except OSError as e:
        if not os.path.isdir(path) or os.path.islink(path):
            raise errors.FilesystemError(
                f"Could not remove '{path}': {e}", path=path
            ) from e

    # A directory sits where a file was expected; say so, then remove the tree.
    log.warning("'%s' is a directory; removing it recursively.", path)
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise errors.FilesystemError(
            f"Could not remove directory '{path}': {e}", path=path
        ) from e
    return True


def move_path(src: str | os.PathLike, dest_dir: str | os.PathLike) -> str:
    """Moves src into dest_dir, keeping its base name, and returns the new path."""
    target = os.path.join(os.fspath(dest_dir), os.path.basename(os.fspath(src)))
    try:
        shutil.move(os.fspath(src), target)
    except OSError as e:
        raise errors.FilesystemError(
            f"Could not move '{src}' to '{target}': {e}", path=os.fspath(src)
        ) from e
    log.debug("Moved %s -> %s", src, target)
    return target


def relative_posix(path: str, root: str) -> str:
    """Returns path relative to root with forward slashes, as stored in tar member names."""
    return Path(os.path.relpath(path, root)).as_posix()


def format_bytes(byte_count: int) -> str:
    """Converts a byte count to a human-readable string (KB, MB, etc.)."""
    if byte_count is None:
        return "0 B"
    power, n = 1024, 0
    power_labels = {0: "B", 1: "KB", 2: "MB", 3: "GB"}
    while byte_count >= power and n < len(power_labels) - 1:
        byte_count /= power
        n += 1
    return f"{byte_count:.2f} {power_labels[n]}"
