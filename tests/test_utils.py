# tests/test_utils.py
"""
Unit tests for the filesystem helpers in tgzpack/utils.py.
"""

import os

import pytest

from tgzpack import errors, utils


class TestRemovePath:
    """remove_path treats "not found" as success."""

    def test_removes_file(self, fake_fs):
        fake_fs.create_file("/out/release.tgz")
        assert utils.remove_path("/out/release.tgz") is True
        assert not os.path.exists("/out/release.tgz")

    def test_missing_path_is_not_an_error(self, fake_fs):
        assert utils.remove_path("/nothing/here") is False

    def test_directory_is_removed_with_warning(self, fake_fs, mocker):
        fake_fs.create_file("/out/release/INSTALL.sh")
        mock_warning = mocker.patch("tgzpack.utils.log.warning")

        assert utils.remove_path("/out/release") is True

        assert not os.path.exists("/out/release")
        mock_warning.assert_called_once()

    def test_other_failures_raise(self, tmp_path, mocker):
        target = tmp_path / "locked.tgz"
        target.write_bytes(b"x")
        mocker.patch("tgzpack.utils.os.remove", side_effect=PermissionError(13, "denied"))

        with pytest.raises(errors.FilesystemError) as excinfo:
            utils.remove_path(target)
        assert excinfo.value.path == str(target)


class TestMovePath:
    def test_moves_into_directory(self, fake_fs):
        fake_fs.create_file("/src/source.tgz", contents="data")
        fake_fs.create_dir("/out")

        target = utils.move_path("/src/source.tgz", "/out")

        assert target == "/out/source.tgz"
        assert not os.path.exists("/src/source.tgz")
        with open("/out/source.tgz") as f:
            assert f.read() == "data"

    def test_missing_source_raises(self, fake_fs):
        fake_fs.create_dir("/out")
        with pytest.raises(errors.FilesystemError):
            utils.move_path("/src/missing.tgz", "/out")


class TestFormatting:
    def test_relative_posix(self):
        path = os.path.join("/src", "nested", "inner.txt")
        assert utils.relative_posix(path, "/src") == "nested/inner.txt"

    @pytest.mark.parametrize(
        "count, expected",
        [(0, "0.00 B"), (1536, "1.50 KB"), (5 * 1024 * 1024, "5.00 MB"), (None, "0 B")],
    )
    def test_format_bytes(self, count, expected):
        assert utils.format_bytes(count) == expected
