# tgzpack/pipeline.py
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
Runs one packaging pass over a source tree.

The stages run in a fixed order and the first failure ends the run. Nothing
is rolled back: the Clean stage of the next run removes whatever a failed run
left behind, which is what makes re-running from the top safe.
"""

import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from . import config, errors, script_patcher, utils, validation
from .archive import ArchiveWriter
from .collector import DirectoryCollector
from .logger import log
from .policy import PathPolicy


class Stage(Enum):
    INIT = "init"
    CLEAN = "clean"
    COLLECT = "collect"
    ARCHIVE_SOURCE = "archive source"
    PATCH_SCRIPT = "patch script"
    PREPARE_OUTPUT_DIR = "prepare output directory"
    MOVE_ARTIFACTS = "move artifacts"
    ARCHIVE_OUTPUT = "archive output"
    DONE = "done"


@dataclass
class PipelineResult:
    output_path: str
    staging_dir: str
    files: list[str] = field(default_factory=list)
    backup_list: list[str] = field(default_factory=list)


def staging_dir_for(output_path: str) -> str:
    """The directory assembled before the final archive: output path minus its .tgz suffix."""
    if output_path.endswith(config.ARCHIVE_EXTENSION) and len(output_path) > len(
        config.ARCHIVE_EXTENSION
    ):
        return output_path[: -len(config.ARCHIVE_EXTENSION)]
    return output_path + config.STAGING_DIR_SUFFIX


def _is_within(path: str, parent: str) -> bool:
    path, parent = os.path.realpath(path), os.path.realpath(parent)
    return path == parent or path.startswith(parent.rstrip(os.sep) + os.sep)


class PackagingPipeline:
    """Clean, collect, archive, patch, assemble and re-archive one source tree."""

    def __init__(
        self,
        source_dir: str | os.PathLike,
        output_path: str | os.PathLike,
        install_script_name: str = "INSTALL.sh",
        backup_marker: str = "# >>> tgzpack backup list >>>",
        source_archive_name: str = "source.tgz",
        compression: str = "gzip",
        backup_paths: Sequence[str] | None = None,
        collector: DirectoryCollector | None = None,
        writer: ArchiveWriter | None = None,
    ):
        if not validation.validate_archive_name(source_archive_name):
            raise errors.ValidationError(
                f"Source archive name '{source_archive_name}' must be a plain file name "
                f"ending in '{config.ARCHIVE_EXTENSION}'."
            )
        self.source_dir = os.path.abspath(os.fspath(source_dir))
        self.output_path = os.path.abspath(os.fspath(output_path))
        self.staging_dir = staging_dir_for(self.output_path)
        self.install_script_name = install_script_name
        self.backup_marker = backup_marker
        self.source_archive_name = source_archive_name
        self.compression = compression
        self.backup_paths = list(backup_paths) if backup_paths is not None else None
        self.collector = collector or DirectoryCollector(PathPolicy([install_script_name]))
        self.writer = writer or ArchiveWriter()
        self.stage = Stage.INIT

    @classmethod
    def from_settings(cls, source_dir, output_path, settings: dict, **overrides):
        """Builds a pipeline from the settings dict; keyword overrides win over settings."""
        params = {
            "install_script_name": settings["install_script_name"],
            "backup_marker": settings["backup_marker"],
            "source_archive_name": settings["source_archive_name"],
            "compression": settings["compression"],
        }
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(source_dir, output_path, **params)

    @property
    def script_path(self) -> str:
        return os.path.join(self.source_dir, self.install_script_name)

    @property
    def source_archive_path(self) -> str:
        return os.path.join(self.source_dir, self.source_archive_name)

    def _advance(self, stage: Stage) -> None:
        self.stage = stage
        log.info("Stage: %s", stage.value)

    def run(self) -> PipelineResult:
        """Runs every stage in order. Raises the first TgzpackError encountered."""
        self._check_layout()
        result = PipelineResult(output_path=self.output_path, staging_dir=self.staging_dir)

        self._advance(Stage.CLEAN)
        self.clean()

        self._advance(Stage.COLLECT)
        result.files = self.collector.collect(self.source_dir)

        self._advance(Stage.ARCHIVE_SOURCE)
        self.writer.write_archive(
            result.files,
            self.source_archive_path,
            self.compression,
            arcname=lambda path: utils.relative_posix(path, self.source_dir),
        )

        self._advance(Stage.PATCH_SCRIPT)
        result.backup_list = self.backup_list_for(result.files)
        script_patcher.patch_file(self.script_path, result.backup_list, self.backup_marker)

        self._advance(Stage.PREPARE_OUTPUT_DIR)
        self.prepare_output_dir()

        self._advance(Stage.MOVE_ARTIFACTS)
        members = self.move_artifacts()

        self._advance(Stage.ARCHIVE_OUTPUT)
        staging_parent = os.path.dirname(self.staging_dir)
        self.writer.write_archive(
            members,
            self.output_path,
            self.compression,
            arcname=lambda path: utils.relative_posix(path, staging_parent),
        )

        self._advance(Stage.DONE)
        return result

    def _check_layout(self) -> None:
        # Clean deletes the staging directory, so it must never overlap the source tree.
        if _is_within(self.source_dir, self.staging_dir) or _is_within(
            self.staging_dir, self.source_dir
        ):
            raise errors.ValidationError(
                f"Output directory '{self.staging_dir}' overlaps the source directory "
                f"'{self.source_dir}'."
            )

    def clean(self) -> None:
        """Removes a previous run's final archive and output directory, if any."""
        for target in (self.output_path, self.staging_dir):
            if utils.remove_path(target):
                log.info("Removed leftover output %s", target)

    def backup_list_for(self, files: Sequence[str]) -> list[str]:
        """The caller's backup paths, or the collected files relative to the source tree."""
        if self.backup_paths is not None:
            return list(self.backup_paths)
        return [utils.relative_posix(path, self.source_dir) for path in files]

    def prepare_output_dir(self) -> None:
        try:
            os.mkdir(self.staging_dir)
        except OSError as e:
            raise errors.FilesystemError(
                f"Could not create output directory '{self.staging_dir}': {e}",
                path=self.staging_dir,
            ) from e

    def move_artifacts(self) -> list[str]:
        """Moves the source archive and the patched script into the output directory."""
        try:
            archive = utils.move_path(self.source_archive_path, self.staging_dir)
        except errors.FilesystemError as e:
            raise errors.ArchiveMoveError(str(e), path=e.path) from e
        try:
            script = utils.move_path(self.script_path, self.staging_dir)
        except errors.FilesystemError as e:
            raise errors.ScriptMoveError(str(e), path=e.path) from e
        return [archive, script]
