# tests/test_cli_entrypoint.py
"""
Tests for the command-line argument parsing and dispatching in tgzpack/tgzpack.py.
"""

import json
import sys
import tarfile

import pytest

from tgzpack import config, errors, tgzpack
from tgzpack.pipeline import PipelineResult


@pytest.fixture(autouse=True)
def quiet_environment(mocker):
    """Keeps the real dotenv file and console log level out of the tests."""
    mocker.patch("tgzpack.tgzpack.load_dotenv")
    mocker.patch("tgzpack.logger.set_console_level")


@pytest.fixture
def mock_pipeline(mocker):
    """Replaces the pipeline class; returns the mock for customization within tests."""
    mock_cls = mocker.patch("tgzpack.tgzpack.PackagingPipeline")
    instance = mock_cls.from_settings.return_value
    instance.source_dir = "/src"
    instance.output_path = "/out/release.tgz"
    instance.run.return_value = PipelineResult(
        output_path="/out/release.tgz", staging_dir="/out/release", files=["/src/a.txt"]
    )
    return mock_cls


class TestCLIEntrypoint:
    """Test suite for the main CLI entrypoint."""

    def test_no_args_prints_usage(self, monkeypatch, capsys, mock_pipeline):
        """Running `tgzpack` with no args is a no-op, not an error."""
        monkeypatch.setattr(sys, "argv", ["tgzpack"])
        tgzpack.main()
        captured = capsys.readouterr()
        assert "usage:" in captured.out
        mock_pipeline.from_settings.assert_not_called()

    def test_single_arg_prints_usage(self, monkeypatch, capsys, mock_pipeline):
        monkeypatch.setattr(sys, "argv", ["tgzpack", "/src"])
        tgzpack.main()
        assert "usage:" in capsys.readouterr().out
        mock_pipeline.from_settings.assert_not_called()

    def test_double_dash_packages_directory_named_settings(
        self, monkeypatch, tmp_path, mock_pipeline, mocker
    ):
        """`tgzpack -- settings OUT` runs the pipeline instead of the settings command."""
        settings_command = mocker.patch("tgzpack.tgzpack.run_settings_command")
        output = str(tmp_path / "release.tgz")
        monkeypatch.setattr(sys, "argv", ["tgzpack", "--", "settings", output])

        tgzpack.main()

        settings_command.assert_not_called()
        call_args, _ = mock_pipeline.from_settings.call_args
        assert call_args[0] == "settings"
        assert call_args[1] == output

    def test_runs_pipeline(self, monkeypatch, tmp_path, mock_pipeline):
        output = str(tmp_path / "release.tgz")
        monkeypatch.setattr(sys, "argv", ["tgzpack", "/src", output])

        tgzpack.main()

        mock_pipeline.from_settings.assert_called_once()
        call_args, call_kwargs = mock_pipeline.from_settings.call_args
        assert call_args[0] == "/src"
        assert call_args[1] == output
        assert call_kwargs["backup_paths"] is None
        mock_pipeline.from_settings.return_value.run.assert_called_once()

    def test_options_are_forwarded(self, monkeypatch, tmp_path, mock_pipeline):
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "tgzpack",
                "/src",
                str(tmp_path / "release.tgz"),
                "--compression",
                "none",
                "--script",
                "setup.sh",
                "--marker",
                "# BACKUP",
                "-b",
                "/etc/a.conf",
                "--backup",
                "/etc/b.conf",
            ],
        )

        tgzpack.main()

        _, call_kwargs = mock_pipeline.from_settings.call_args
        assert call_kwargs["compression"] == "none"
        assert call_kwargs["install_script_name"] == "setup.sh"
        assert call_kwargs["backup_marker"] == "# BACKUP"
        assert call_kwargs["backup_paths"] == ["/etc/a.conf", "/etc/b.conf"]

    def test_output_directory_exits_before_packaging(
        self, monkeypatch, tmp_path, capsys, mock_pipeline
    ):
        monkeypatch.setattr(sys, "argv", ["tgzpack", "/src", str(tmp_path)])

        with pytest.raises(SystemExit) as excinfo:
            tgzpack.main()

        assert excinfo.value.code == config.EXIT_INVALID_OUTPUT
        assert "existing directory" in capsys.readouterr().err
        mock_pipeline.from_settings.assert_not_called()

    @pytest.mark.parametrize(
        "error, code",
        [
            (errors.DirectoryOpenError("no dir"), config.EXIT_FILESYSTEM),
            (errors.StatError("gone"), config.EXIT_ARCHIVE),
            (errors.MarkerNotFoundError("no marker"), config.EXIT_SCRIPT_PATCH),
            (errors.ArchiveMoveError("mv archive"), config.EXIT_MOVE_ARCHIVE),
            (errors.ScriptMoveError("mv script"), config.EXIT_MOVE_SCRIPT),
        ],
    )
    def test_errors_map_to_exit_codes(
        self, monkeypatch, tmp_path, mock_pipeline, error, code
    ):
        mock_pipeline.from_settings.return_value.run.side_effect = error
        monkeypatch.setattr(sys, "argv", ["tgzpack", "/src", str(tmp_path / "r.tgz")])

        with pytest.raises(SystemExit) as excinfo:
            tgzpack.main()

        assert excinfo.value.code == code

    def test_invalid_option_exits(self, monkeypatch):
        monkeypatch.setattr(sys, "argv", ["tgzpack", "--compression", "xz", "/src", "/out"])
        with pytest.raises(SystemExit):
            tgzpack.main()

    def test_debug_flag_sets_console_level(self, monkeypatch, tmp_path, mock_pipeline):
        monkeypatch.setattr(
            sys, "argv", ["tgzpack", "--debug", "/src", str(tmp_path / "r.tgz")]
        )
        tgzpack.main()
        tgzpack.logger.set_console_level.assert_called_once_with("DEBUG")

    def test_env_log_level(self, monkeypatch, tmp_path, mock_pipeline):
        monkeypatch.setenv(config.LOG_LEVEL_ENV_VAR, "WARNING")
        monkeypatch.setattr(sys, "argv", ["tgzpack", "/src", str(tmp_path / "r.tgz")])
        tgzpack.main()
        tgzpack.logger.set_console_level.assert_called_once_with("WARNING")


class TestSettingsCommand:
    """The `settings` sub-command shows or updates settings."""

    def test_shows_settings(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["tgzpack", "settings"])
        tgzpack.main()
        shown = json.loads(capsys.readouterr().out)
        assert "install_script_name" in shown

    def test_updates_setting(self, monkeypatch, mocker):
        mock_save = mocker.patch("tgzpack.tgzpack.save_setting")
        monkeypatch.setattr(sys, "argv", ["tgzpack", "settings", "compression", "none"])
        tgzpack.main()
        mock_save.assert_called_once_with("compression", "none")

    def test_wrong_arity_prints_usage(self, monkeypatch, mocker, capsys):
        mock_save = mocker.patch("tgzpack.tgzpack.save_setting")
        monkeypatch.setattr(sys, "argv", ["tgzpack", "settings", "compression"])
        tgzpack.main()
        assert "Usage" in capsys.readouterr().out
        mock_save.assert_not_called()


class TestEndToEnd:
    """Runs the real pipeline through main()."""

    def test_packages_source_tree(self, monkeypatch, mocker, tmp_path, source_tree):
        mocker.patch.dict(
            tgzpack.settings,
            {
                "install_script_name": "INSTALL.sh",
                "backup_marker": "# >>> tgzpack backup list >>>",
                "source_archive_name": "source.tgz",
                "compression": "gzip",
            },
        )
        output = tmp_path / "release.tgz"
        monkeypatch.setattr(
            sys,
            "argv",
            [
                "tgzpack",
                str(source_tree),
                str(output),
                "--script",
                "INSTALL.sh",
                "--marker",
                "# >>> tgzpack backup list >>>",
                "--compression",
                "gzip",
            ],
        )

        tgzpack.main()

        with tarfile.open(output) as tar:
            assert sorted(tar.getnames()) == ["release/INSTALL.sh", "release/source.tgz"]
