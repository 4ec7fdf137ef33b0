# tgzpack/script_patcher.py
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

"""
Rewrites the backup list embedded at the end of an install script.

Everything up to and including the marker line is kept byte for byte.
Everything after it is thrown away and regenerated from the backup list, so
patching the same script again with the same list yields the same bytes.
"""

import os
import shutil
import tempfile
from collections.abc import Iterable

from . import errors
from .logger import log

CRLF = b"\r\n"
LF = b"\n"
CR = b"\r"


def detect_newline(content: bytes) -> bytes:
    """Returns the document's line terminator: CRLF, then LF, then CR, else LF."""
    if CRLF in content:
        return CRLF
    if LF in content:
        return LF
    if CR in content:
        return CR
    return LF


def _as_bytes(value: str | bytes) -> bytes:
    return value if isinstance(value, bytes) else os.fsencode(value)


def find_marker_end(content: bytes, marker: bytes) -> int | None:
    """
    Returns the offset just past the marker line, including its own terminator,
    or None if absent. Lines may end in CRLF, LF or CR independently.
    """
    pos = 0
    for line in content.splitlines(keepends=True):
        if line.rstrip(CRLF) == marker:
            return pos + len(line)
        pos += len(line)
    return None


def patch(
    original: bytes,
    backup_list: Iterable[str | bytes],
    marker: str | bytes,
    newline: bytes | None = None,
) -> bytes:
    """
    Returns original with everything after the marker line replaced by one line
    per backup entry. Raises MarkerNotFoundError if no line equals marker.
    newline only terminates the emitted lines; the head keeps its own endings.
    """
    nl = newline if newline is not None else detect_newline(original)
    marker_bytes = _as_bytes(marker)

    head_end = find_marker_end(original, marker_bytes)
    if head_end is None:
        raise errors.MarkerNotFoundError(
            f"Marker line {marker_bytes.decode(errors='replace')!r} not found in install script."
        )

    head = original[:head_end]
    if not head.endswith((LF, CR)):
        # Marker is the final line and has no terminator of its own.
        head += nl
    tail = b"".join(_as_bytes(entry) + nl for entry in backup_list)
    return head + tail


def read_script(path: str | os.PathLike) -> bytes:
    """Reads the whole install script."""
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise errors.ScriptPatchError(f"Could not read install script '{path}': {e}") from e


def write_script(
    path: str | os.PathLike, content: bytes, new_path: str | os.PathLike | None = None
) -> str:
    """
    Saves content over path, or to new_path when given, and returns the target.
    The bytes go to a temporary sibling first and replace the target in one
    rename; permission bits of the original script are kept.
    """
    target = os.fspath(new_path if new_path is not None else path)
    directory = os.path.dirname(os.path.abspath(target))
    try:
        fd, tmp_path = tempfile.mkstemp(prefix=".tgzpack-", dir=directory)
    except OSError as e:
        raise errors.ScriptPatchError(f"Could not write install script '{target}': {e}") from e
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        if os.path.exists(path):
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, target)
    except OSError as e:
        try:
            os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as cleanup_error:
            log.warning("Could not remove temporary file %s: %s", tmp_path, cleanup_error)
        raise errors.ScriptPatchError(f"Could not write install script '{target}': {e}") from e
    return target


def patch_file(
    path: str | os.PathLike,
    backup_list: Iterable[str | bytes],
    marker: str | bytes,
    newline: bytes | None = None,
) -> int:
    """Patches the install script at path in place. Returns the number of backup lines written."""
    entries = list(backup_list)
    original = read_script(path)
    patched = patch(original, entries, marker, newline)
    write_script(path, patched)
    log.info("Patched %s with %d backup entr%s", path, len(entries), "y" if len(entries) == 1 else "ies")
    return len(entries)
