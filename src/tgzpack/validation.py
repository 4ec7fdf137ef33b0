# tgzpack/validation.py
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
Checks command-line arguments before any packaging work starts.
"""

import os
from collections.abc import Sequence
from dataclasses import dataclass

from . import config, errors


@dataclass(frozen=True)
class Args:
    directory: str
    output: str


def validate_output_path(path: str | os.PathLike) -> bool:
    """False if path is an existing directory; a missing path or a regular file is accepted."""
    return not os.path.isdir(os.fspath(path))


def validate_archive_name(name: str) -> bool:
    """True if name is a plain file name ending in the archive extension."""
    return (
        bool(name)
        and os.path.basename(name) == name
        and name not in (".", "..")
        and name.endswith(config.ARCHIVE_EXTENSION)
        and len(name) > len(config.ARCHIVE_EXTENSION)
    )


def validate_args(values: Sequence[str | None]) -> Args:
    """
    Validates [directory, output] and returns them as Args.
    Raises ValidationError if either is missing and OutputIsDirectoryError if
    the output path is an existing directory.
    """
    if len(values) < 2 or not values[0] or not values[1]:
        raise errors.ValidationError(
            "Both a directory to archive and an output path are required."
        )
    directory, output = values[0], values[1]
    if not validate_output_path(output):
        raise errors.OutputIsDirectoryError(
            f"Output path '{output}' is an existing directory."
        )
    return Args(directory=directory, output=output)
