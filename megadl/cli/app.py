"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from megadl import __version__
from megadl.api.factory import start_session
from megadl.core.download_manager import DownloadManager, prepare_references
from megadl.exceptions import MegadlError
from megadl.models.config import DownloadConfig
from megadl.storage.config_manager import ConfigManager

from .formatters import format_error_with_suggestions, print_summary_panel
from .progress_manager import ProgressReporter

# Standard output may carry downloaded data, all messages go to stderr.
console = Console(stderr=True)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            show_time=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("megadl")

app = typer.Typer(
    name="megadl",
    help="Download exported files and folders from mega.nz.",
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)


def get_config_dir() -> Path:
    if os.name == "nt":
        base_dir = Path(os.getenv("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(os.getenv("XDG_CONFIG_HOME", "~/.config"))
    return base_dir.expanduser() / "megadl"


CONFIG_DIR = get_config_dir()
CONFIG_FILE = CONFIG_DIR / "config.ini"


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]megadl[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()


async def _download_async(config: DownloadConfig, links: list[str]) -> int:
    """Starts the session, processes every link and closes the session again."""
    reporter = ProgressReporter(
        console,
        show_progress=config.show_progress,
        stream=config.stream,
        output=sys.stdout.buffer if config.stream else None,
    )
    names_console = Console(highlight=False)

    session = await start_session(config)
    manager = DownloadManager(config, session, reporter, names_console)
    try:
        status = await manager.run(links)
    finally:
        reporter.clear()
        await session.close()

    if config.show_progress:
        print_summary_panel(console, manager.stats, manager.stats.elapsed_seconds)
    return status


@app.command()
def download(
    links: list[str] | None = typer.Argument(  # noqa: B008
        None, help="One or more exported file or folder links.", metavar="LINKS..."
    ),
    path: str | None = typer.Option(
        None,
        "--path",
        help="Local directory or file name to save data to. Use '-' to stream to stdout.",
        metavar="PATH",
    ),
    no_progress: bool = typer.Option(
        False, "--no-progress", help="Disable progress bar."
    ),
    print_names: bool = typer.Option(
        False, "--print-names", help="Print names of downloaded files."
    ),
    session: str | None = typer.Option(
        None,
        "--session",
        help="Session backend as 'package.module:callable'.",
        metavar="FACTORY",
    ),
    config_file: Path = typer.Option(  # noqa: B008
        CONFIG_FILE, "--config", help="Path to the configuration file."
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Download exported files from mega.nz."""
    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("megadl").setLevel(log_level)

    cli_options = {
        key: value
        for key, value in {
            "path": path,
            "session_factory": session,
            "no_progress": no_progress or None,
            "print_names": print_names or None,
        }.items()
        if value is not None
    }

    links = links or []
    try:
        config = ConfigManager(config_file).load_config(cli_options)
        # Reject bad combinations before touching the network.
        prepare_references(links, config.stream)
        status = asyncio.run(_download_async(config, links))
    except MegadlError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    raise typer.Exit(code=status)
