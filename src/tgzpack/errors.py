# tgzpack/errors.py
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
Exception taxonomy for the packaging pipeline.

Every class carries the process exit code the command-line entry point uses
when the error reaches it, so operators can tell failures apart from the exit
status alone.
"""

from . import config


class TgzpackError(Exception):
    """Base class for all errors raised by tgzpack."""

    exit_code = config.EXIT_FAILURE


class FilesystemError(TgzpackError):
    """Open, stat, delete or rename failure on the local filesystem."""

    exit_code = config.EXIT_FILESYSTEM

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class DirectoryOpenError(FilesystemError):
    """A path handed to the collector is not a readable directory."""

    pass


class ArchiveMoveError(FilesystemError):
    """The intermediate source archive could not be moved into the output directory."""

    exit_code = config.EXIT_MOVE_ARCHIVE


class ScriptMoveError(FilesystemError):
    """The patched install script could not be moved into the output directory."""

    exit_code = config.EXIT_MOVE_SCRIPT


class ArchiveError(TgzpackError):
    """Failure while building a tar archive."""

    exit_code = config.EXIT_ARCHIVE

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class ArchiveInitError(ArchiveError):
    pass


class ArchiveOpenError(ArchiveError):
    pass


class StatError(ArchiveError):
    pass


class HeaderWriteError(ArchiveError):
    pass


class DataWriteError(ArchiveError):
    pass


class EntryFinishError(ArchiveError):
    pass


class ArchiveCloseError(ArchiveError):
    pass


class ScriptPatchError(TgzpackError):
    """The install script could not be read, patched or written back."""

    exit_code = config.EXIT_SCRIPT_PATCH


class MarkerNotFoundError(ScriptPatchError):
    """The install script does not contain the backup marker line."""

    pass


class ValidationError(TgzpackError):
    """Command-line arguments were rejected before any packaging work."""

    exit_code = config.EXIT_INVALID_OUTPUT


class OutputIsDirectoryError(ValidationError):
    pass
