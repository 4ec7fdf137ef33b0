# tgzpack/collector.py
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
Walks a source tree and returns the files that belong in its archive.

Each directory is listed twice: a cleanup pass deletes stale archives left by
earlier runs, then a collection pass gathers the remaining files. Directories
are descended into as they are encountered and are never returned themselves,
so a directory without eligible files contributes nothing.
"""

import os
from collections.abc import Iterator

from . import config, errors
from .logger import log
from .policy import PathPolicy

_SELF_AND_PARENT = {".", ".."}


class DirectoryCollector:
    """Collects absolute file paths below a root directory, depth first."""

    def __init__(self, policy: PathPolicy, stale_extension: str = config.ARCHIVE_EXTENSION):
        self.policy = policy
        self.stale_extension = stale_extension

    def collect(self, root_path: str | os.PathLike) -> list[str]:
        """
        Returns every eligible file below root_path in directory-iteration order.
        Raises DirectoryOpenError if root_path is not a readable directory and
        FilesystemError if the walk fails anywhere below it.
        """
        root = os.path.abspath(os.fspath(root_path))
        if not os.path.isdir(root):
            raise errors.DirectoryOpenError(
                f"'{root}' is not a readable directory.", path=root
            )

        collected: list[str] = []
        # Open listings from the root down to the directory being read.
        pending: list[tuple[str, Iterator[os.DirEntry]]] = []
        try:
            pending.append((root, self._open_level(root, is_root=True)))
            while pending:
                dir_path, entries = pending[-1]
                entry = self._next_entry(dir_path, entries)
                if entry is None:
                    entries.close()
                    pending.pop()
                    continue

                log.debug("Entry: %s", entry.name)
                if self.policy.is_ignored(entry.name):
                    log.debug("Ignoring %s", entry.path)
                    continue
                if entry.name in _SELF_AND_PARENT:
                    continue

                child = os.path.join(dir_path, entry.name)
                if self._is_directory(entry):
                    listing = self._open_level(child)
                    if listing is not None:
                        pending.append((child, listing))
                    continue

                collected.append(child)
        finally:
            for _, entries in pending:
                entries.close()

        log.info("Collected %d file(s) under %s", len(collected), root)
        return collected

    def _open_level(self, dir_path: str, is_root: bool = False):
        """Runs the cleanup pass on dir_path, then opens it for the collection pass."""
        try:
            self.remove_stale_artifacts(dir_path)
            return os.scandir(dir_path)
        except FileNotFoundError as e:
            if is_root:
                raise errors.DirectoryOpenError(
                    f"Could not open directory '{dir_path}': {e}", path=dir_path
                ) from e
            log.warning("Directory vanished during the walk, skipping: %s", dir_path)
            return None
        except NotADirectoryError as e:
            raise errors.DirectoryOpenError(
                f"'{dir_path}' is not a directory: {e}", path=dir_path
            ) from e
        except OSError as e:
            error_cls = errors.DirectoryOpenError if is_root else errors.FilesystemError
            raise error_cls(
                f"Could not open directory '{dir_path}': {e}", path=dir_path
            ) from e

    def remove_stale_artifacts(self, dir_path: str) -> list[str]:
        """Deletes every non-directory entry of dir_path named *<stale_extension>."""
        removed = []
        with os.scandir(dir_path) as entries:
            for entry in entries:
                if not entry.name.endswith(self.stale_extension):
                    continue
                if self._is_directory(entry):
                    continue
                try:
                    os.remove(entry.path)
                except FileNotFoundError:
                    continue
                except OSError as e:
                    raise errors.FilesystemError(
                        f"Could not remove stale archive '{entry.path}': {e}",
                        path=entry.path,
                    ) from e
                log.info("Removed stale archive %s", entry.path)
                removed.append(entry.path)
        return removed

    @staticmethod
    def _next_entry(dir_path: str, entries):
        try:
            return next(entries, None)
        except OSError as e:
            raise errors.FilesystemError(
                f"Could not read directory '{dir_path}': {e}", path=dir_path
            ) from e

    @staticmethod
    def _is_directory(entry: os.DirEntry) -> bool:
        # Symlinks are archived as links, never followed.
        try:
            return entry.is_dir(follow_symlinks=False)
        except OSError as e:
            raise errors.FilesystemError(
                f"Could not inspect '{entry.path}': {e}", path=entry.path
            ) from e
