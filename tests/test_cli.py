"""Tests for the command-line interface."""

import pytest
from conftest import FILE_HANDLE, FILE_KEY, FILE_LINK, FOLDER_HANDLE, FOLDER_KEY, FOLDER_LINK
from typer.testing import CliRunner

import megadl.__main__ as entry
from megadl import __version__
from megadl.api.factory import SESSION_FACTORY_ENV
from megadl.cli import app as app_module
from megadl.cli.app import app
from megadl.exceptions import ErrorKind, SessionError, TransferError
from megadl.models.stats import DownloadStats

runner = CliRunner()


@pytest.fixture
def use_session(monkeypatch, session):
    """Routes the CLI to the shared fake session."""
    started = []

    async def fake_start_session(config):
        started.append(config)
        return session

    monkeypatch.setattr(app_module, "start_session", fake_start_session)
    monkeypatch.delenv(SESSION_FACTORY_ENV, raising=False)
    return started


@pytest.fixture
def cli_args(tmp_path):
    return ["--config", str(tmp_path / "missing.ini"), "--no-progress"]


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_download_file(use_session, session, cli_args, tmp_path):
    session.add_file(FILE_HANDLE, FILE_KEY, "song.flac", b"fLaC")

    result = runner.invoke(app, [FILE_LINK, "--path", str(tmp_path), *cli_args])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "song.flac").read_bytes() == b"fLaC"
    assert session.closed


def test_summary_panel_after_run(use_session, session, tmp_path, monkeypatch):
    session.add_file(FILE_HANDLE, FILE_KEY, "song.flac", b"fLaC")
    monkeypatch.setattr(
        DownloadStats, "elapsed_seconds", property(lambda self: 3725.0)
    )

    result = runner.invoke(
        app, [FILE_LINK, "--path", str(tmp_path), "--config", str(tmp_path / "x.ini")]
    )

    assert result.exit_code == 0, result.output
    assert "Download Complete!" in result.output
    assert "1h 2m 5s" in result.output


def test_download_folder(use_session, session, cli_args, tmp_path):
    session.add_folder(FOLDER_HANDLE, FOLDER_KEY, "Share", {"dir": {"x.txt": b"x"}})

    result = runner.invoke(app, [FOLDER_LINK, "--path", str(tmp_path), *cli_args])

    assert result.exit_code == 0, result.output
    assert (tmp_path / "dir" / "x.txt").exists()


def test_failure_exit_status(use_session, session, cli_args, tmp_path):
    session.add_file(FILE_HANDLE, FILE_KEY, "a.bin", b"a")
    session.fail(FILE_HANDLE, TransferError("gone", ErrorKind.NOT_FOUND))

    result = runner.invoke(app, [FILE_LINK, "--path", str(tmp_path), *cli_args])

    assert result.exit_code == 1
    assert session.closed


def test_stream_to_stdout(use_session, session, cli_args):
    content = b"0123456789abcdef"
    session.add_file(FILE_HANDLE, FILE_KEY, "data.bin", content)

    result = runner.invoke(app, [FILE_LINK, "--path", "-", *cli_args])

    assert result.exit_code == 0
    assert result.stdout_bytes == content


def test_print_names(use_session, session, cli_args, tmp_path):
    session.add_file(FILE_HANDLE, FILE_KEY, "named.txt", b"n")

    result = runner.invoke(
        app, [FILE_LINK, "--path", str(tmp_path), "--print-names", *cli_args]
    )

    assert result.exit_code == 0
    assert "named.txt" in result.stdout


def test_no_links_is_a_usage_error(use_session, session, cli_args):
    result = runner.invoke(app, cli_args)

    assert result.exit_code == 1
    assert "No links specified" in result.output
    assert use_session == []


def test_stream_of_folder_rejected_before_session(use_session, cli_args):
    result = runner.invoke(app, [FOLDER_LINK, "--path", "-", *cli_args])

    assert result.exit_code == 1
    assert use_session == []


def test_stream_of_several_links_rejected(use_session, cli_args):
    result = runner.invoke(app, [FILE_LINK, FILE_LINK, "--path", "-", *cli_args])

    assert result.exit_code == 1
    assert "multiple files" in result.output
    assert use_session == []


def test_cli_options_reach_config(use_session, session, cli_args, tmp_path):
    session.add_file(FILE_HANDLE, FILE_KEY, "a.bin", b"a")

    runner.invoke(
        app,
        [FILE_LINK, "--path", str(tmp_path), "--session", "pkg.mod:make", *cli_args],
    )

    config = use_session[0]
    assert config.path == str(tmp_path)
    assert config.session_factory == "pkg.mod:make"
    assert config.no_progress is True


def test_session_start_failure(monkeypatch, cli_args, tmp_path):
    async def failing_start_session(config):
        raise SessionError("login refused")

    monkeypatch.setattr(app_module, "start_session", failing_start_session)

    result = runner.invoke(app, [FILE_LINK, "--path", str(tmp_path), *cli_args])

    assert result.exit_code == 1
    assert "login refused" in result.output


class TestMain:
    def test_keyboard_interrupt_exits_130(self, monkeypatch):
        def interrupted():
            raise KeyboardInterrupt

        monkeypatch.setattr(entry, "app", interrupted)

        with pytest.raises(SystemExit) as excinfo:
            entry.main()
        assert excinfo.value.code == 130

    def test_unexpected_error_exits_1(self, monkeypatch):
        def broken():
            raise RuntimeError("boom")

        monkeypatch.setattr(entry, "app", broken)

        with pytest.raises(SystemExit) as excinfo:
            entry.main()
        assert excinfo.value.code == 1
