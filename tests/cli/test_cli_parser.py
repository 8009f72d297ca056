"""
Tests for the gup CLI.
"""

import io
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
import responses

from gup.cli.parser import CLI, main
from gup.config.parser import UpdaterConfig
from gup.core.exceptions import DownloadError, InstallError
from gup.core.progress import NullReporter, Spinner
from gup.updater.pipeline import UpdateResult


def _result(goroot: Path) -> UpdateResult:
    return UpdateResult(
        filename="go1.21.0.linux-amd64.tar.gz",
        url="https://dl.google.com/go/go1.21.0.linux-amd64.tar.gz",
        scratch_dir=Path("/tmp/gup1"),
        archive_path=Path("/tmp/gup1/go1.21.0.linux-amd64.tar.gz"),
        goroot=goroot,
        bytes_downloaded=10,
        files_installed=4,
        directories_installed=3,
    )


class TestArgumentParsing:
    """Test flag parsing."""

    def test_defaults(self):
        """Test version defaults to latest and goroot to empty."""
        args = CLI().parse_args([])

        assert args.version == "latest"
        assert args.goroot == ""
        assert args.config is None
        assert args.verbose is False
        assert args.quiet is False

    def test_flags(self):
        args = CLI().parse_args(
            ["--version", "1.21.0", "--goroot", "/usr/local/go", "-v"]
        )

        assert args.version == "1.21.0"
        assert args.goroot == "/usr/local/go"
        assert args.verbose is True

    def test_config_path(self):
        args = CLI().parse_args(["--config", "gup.yaml"])

        assert args.config == Path("gup.yaml")

    def test_no_subcommands(self, capsys):
        """Test positional arguments are rejected."""
        with pytest.raises(SystemExit) as exc_info:
            CLI().parse_args(["install"])

        assert exc_info.value.code == 2


class TestRun:
    """Test CLI.run exit codes and error reporting."""

    @patch("gup.cli.parser.GoUpdater")
    def test_success(self, mock_updater_cls, tmp_path):
        goroot = tmp_path / "goroot"
        mock_updater_cls.return_value.update.return_value = _result(goroot)

        result = CLI().run(["--version", "1.21.0", "--goroot", str(goroot), "-q"])

        assert result == 0
        mock_updater_cls.return_value.update.assert_called_once_with(
            version="1.21.0", goroot=str(goroot)
        )

    @patch("gup.cli.parser.GoUpdater")
    def test_gup_error_exit_code(self, mock_updater_cls, capsys):
        """Test stage failures become one error line and exit code 1."""
        mock_updater_cls.return_value.update.side_effect = DownloadError(
            "request failed. code: 404 err: Not Found", status_code=404
        )

        result = CLI().run(["--goroot", "/opt/go"])

        assert result == 1
        captured = capsys.readouterr()
        assert "code: 404" in captured.err

    @patch("gup.cli.parser.GoUpdater")
    def test_keyboard_interrupt(self, mock_updater_cls):
        mock_updater_cls.return_value.update.side_effect = KeyboardInterrupt

        assert CLI().run(["--goroot", "/opt/go"]) == 130

    @patch("gup.cli.parser.GoUpdater")
    def test_verbose_prints_traceback(self, mock_updater_cls, capsys):
        mock_updater_cls.return_value.update.side_effect = InstallError("disk full")

        result = CLI().run(["--goroot", "/opt/go", "--verbose"])

        assert result == 1
        assert "Traceback" in capsys.readouterr().err

    @patch("gup.cli.parser.GoUpdater")
    def test_unexpected_error_exit_code(self, mock_updater_cls, capsys):
        """Test errors outside the GupError hierarchy still give one line and 1."""
        mock_updater_cls.return_value.update.side_effect = OSError("disk gone")

        result = CLI().run(["--goroot", "/opt/go"])

        assert result == 1
        err = capsys.readouterr().err
        assert "disk gone" in err
        assert "Traceback" not in err

    def test_empty_goroot_fails(self, capsys):
        """Test running without --goroot is an error, not a deletion."""
        result = CLI().run(["--version", "1.21.0"])

        assert result == 1
        assert "goroot" in capsys.readouterr().err

    def test_missing_config_file(self, tmp_path, capsys):
        result = CLI().run(
            ["--goroot", str(tmp_path / "go"), "--config", str(tmp_path / "nope.yaml")]
        )

        assert result == 1
        assert "Configuration file not found" in capsys.readouterr().err

    @patch("gup.cli.parser.GoUpdater")
    def test_config_file_is_passed_to_updater(self, mock_updater_cls, tmp_path):
        config_file = tmp_path / "gup.yaml"
        config_file.write_text("download_url: https://mirror.example.com/go/\n")
        mock_updater_cls.return_value.update.return_value = _result(tmp_path)

        CLI().run(["--goroot", str(tmp_path / "go"), "--config", str(config_file), "-q"])

        config = mock_updater_cls.call_args.kwargs["config"]
        assert isinstance(config, UpdaterConfig)
        assert config.download_url == "https://mirror.example.com/go/"


class _TTYStream(io.StringIO):
    def isatty(self):
        return True


class TestReporterSelection:
    def test_quiet_uses_null_reporter(self):
        cli = CLI()
        args = cli.parse_args(["-q"])

        assert isinstance(cli._create_reporter(args), NullReporter)

    def test_non_tty_uses_null_reporter(self, monkeypatch):
        cli = CLI()
        monkeypatch.setattr(sys, "stderr", io.StringIO())

        assert isinstance(cli._create_reporter(cli.parse_args([])), NullReporter)

    def test_tty_uses_spinner(self, monkeypatch):
        cli = CLI()
        monkeypatch.setattr(sys, "stderr", _TTYStream())

        reporter = cli._create_reporter(cli.parse_args([]))

        assert isinstance(reporter, Spinner)
        assert reporter.final_message == "\n"


class TestEndToEnd:
    @responses.activate
    def test_full_run(self, tmp_path, scratch_root, go_archive_bytes, monkeypatch):
        """Test main() against mocked endpoints replaces goroot and exits 0."""
        responses.add(responses.GET, "https://golang.org/VERSION", body="go1.21.0")
        responses.add(
            responses.GET,
            "https://dl.google.com/go/go1.21.0.linux-amd64.tar.gz",
            body=go_archive_bytes,
        )
        goroot = tmp_path / "goroot"
        goroot.mkdir()
        (goroot / "stale").write_text("old")
        monkeypatch.setattr(sys, "argv", ["gup", "--goroot", str(goroot), "-q"])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 0
        assert not (goroot / "stale").exists()
        assert (goroot / "VERSION").read_text() == "go1.21.0\n"
