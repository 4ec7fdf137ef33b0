# tgzpack/archive.py
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
Streams a list of files into a PAX tar archive, optionally gzip-compressed.

Entries are written strictly in order through TarFile.addfile: header, data
in chunk-sized copies, padding. A tar stream cannot be rewound, so each
failure is classified by how far the entry got before it happened.
"""

import os
import tarfile
from collections.abc import Callable, Iterable

from . import config, errors, utils
from .logger import log

COMPRESSION_MODES = {
    "gzip": "w:gz",
    "none": "w",
}


class _EntryReader:
    """Hands a source file to TarFile.addfile and records how far the copy got."""

    def __init__(self, f, size: int):
        self._f = f
        self.size = size
        self.delivered = 0
        self.started = False
        self.ran_short = False

    def read(self, n: int = -1) -> bytes:
        self.started = True
        data = self._f.read(n)
        if n > 0 and len(data) < n:
            self.ran_short = True
        self.delivered += len(data)
        return data


class ArchiveWriter:
    """Writes one archive per call to write_archive; holds no state between calls."""

    def __init__(self, chunk_size: int = config.ARCHIVE_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def write_archive(
        self,
        paths: Iterable[str],
        out_path: str | os.PathLike,
        compression: str = "gzip",
        arcname: Callable[[str], str] | None = None,
    ) -> int:
        """
        Archives paths, in order, to out_path and returns the number of entries.
        arcname maps each path to its member name; by default the path is
        stored as given. Raises an ArchiveError subclass on the first failure.
        """
        out_path = os.fspath(out_path)
        try:
            mode = COMPRESSION_MODES[compression]
        except KeyError as e:
            raise errors.ArchiveInitError(
                f"Unknown compression mode '{compression}'.", path=out_path
            ) from e

        try:
            tar = tarfile.open(
                out_path, mode, format=tarfile.PAX_FORMAT, copybufsize=self.chunk_size
            )
        except tarfile.CompressionError as e:
            raise errors.ArchiveInitError(
                f"Could not set up {compression} compression: {e}", path=out_path
            ) from e
        except OSError as e:
            raise errors.ArchiveOpenError(
                f"Could not open '{out_path}' for writing: {e}", path=out_path
            ) from e

        count = 0
        with tar:
            for path in paths:
                name = arcname(path) if arcname else path
                self._write_entry(tar, path, name)
                count += 1
            try:
                tar.close()
            except (OSError, tarfile.TarError) as e:
                raise errors.ArchiveCloseError(
                    f"Could not finalize '{out_path}': {e}", path=out_path
                ) from e

        size = os.path.getsize(out_path)
        log.info(
            "Created archive %s (%d entries, %s)", out_path, count, utils.format_bytes(size)
        )
        return count

    def _write_entry(self, tar: tarfile.TarFile, path: str, name: str) -> None:
        try:
            tarinfo = tar.gettarinfo(path, name)
        except OSError as e:
            raise errors.StatError(f"Could not stat '{path}': {e}", path=path) from e
        if tarinfo is None:
            raise errors.StatError(f"Unsupported file type for '{path}'.", path=path)
        # gettarinfo drops a leading "/"; members keep the name they were given.
        tarinfo.name = name

        if not tarinfo.isreg():
            try:
                tar.addfile(tarinfo)
            except (OSError, ValueError, tarfile.TarError) as e:
                raise errors.HeaderWriteError(
                    f"Could not write header for '{path}': {e}", path=path
                ) from e
            log.debug("Added %s as %s", path, name)
            return

        try:
            f = open(path, "rb")
        except OSError as e:
            raise errors.DataWriteError(
                f"Could not open '{path}' for archiving: {e}", path=path
            ) from e
        with f:
            reader = _EntryReader(f, tarinfo.size)
            try:
                tar.addfile(tarinfo, reader)
            except (OSError, ValueError, tarfile.TarError) as e:
                raise self._entry_error(path, reader, e) from e
        log.debug("Added %s as %s", path, name)

    @staticmethod
    def _entry_error(path: str, reader: _EntryReader, e: Exception) -> errors.ArchiveError:
        """Picks the error class for a failed addfile from how far the copy got."""
        if not reader.started:
            return errors.HeaderWriteError(
                f"Could not write header for '{path}': {e}", path=path
            )
        if reader.ran_short:
            return errors.DataWriteError(
                f"'{path}' shrank while being archived "
                f"({reader.delivered} of {reader.size} bytes read).",
                path=path,
            )
        if reader.delivered < reader.size:
            return errors.DataWriteError(
                f"Could not archive contents of '{path}': {e}", path=path
            )
        return errors.EntryFinishError(
            f"Could not finish entry for '{path}': {e}", path=path
        )
