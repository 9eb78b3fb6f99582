"""
Functions for formatting and displaying data in the console using Rich.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from megadl.models.stats import DownloadStats
from megadl.utils.formatting import format_duration, format_size


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "UsageError": [
            "• Pass one or more links: megadl https://mega.nz/#!<handle>!<key>",
            "• '--path -' streams exactly one file link to standard output.",
            "• Folder links cannot be streamed; give a local directory instead.",
        ],
        "ConfigurationError": [
            "• Check the values in your configuration file.",
            "• Point --session or MEGADL_SESSION_FACTORY at 'package.module:callable'.",
            "• Make sure the session backend package is installed.",
        ],
        "SessionError": [
            "• The session backend could not be started.",
            "• Check your internet connection and backend credentials.",
        ],
        "ClientResponseError": [
            "• A network connection issue occurred.",
            "• The remote service might be temporarily unavailable.",
            "• Please try again in a few minutes.",
        ],
        "TimeoutError": [
            "• A request timed out, which may indicate network throttling.",
            "• Check your internet speed.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_summary_panel(console: Console, stats: DownloadStats, duration_s: float):
    """Displays a final summary of the download session."""
    stats_table = Table(show_header=False, box=None, padding=(0, 2))
    stats_table.add_column(style="bold cyan", justify="right", width=20)
    stats_table.add_column(style="white", justify="left")

    stats_table.add_row(
        "✓ Downloaded:", f"[bold green]{stats.files_downloaded}[/bold green]"
    )
    if stats.directories_created > 0:
        stats_table.add_row(
            "Directories:", f"[green]{stats.directories_created}[/green]"
        )

    # Only show non-zero skip and failure counters
    if stats.files_skipped_exists > 0:
        stats_table.add_row(
            "○ Already Exist:", f"[yellow]{stats.files_skipped_exists}[/yellow]"
        )
    if stats.links_skipped_invalid > 0:
        stats_table.add_row(
            "⚠ Invalid Links:", f"[yellow]{stats.links_skipped_invalid}[/yellow]"
        )
    if stats.files_failed > 0:
        stats_table.add_row("✗ Failed:", f"[bold red]{stats.files_failed}[/bold red]")

    stats_table.add_row("", "")  # Spacer

    if stats.bytes_downloaded > 0:
        stats_table.add_row(
            "Total Size:", f"[cyan]{format_size(stats.bytes_downloaded)}[/cyan]"
        )
        avg_speed = stats.bytes_downloaded / duration_s if duration_s > 0 else 0
        stats_table.add_row(
            "Avg. Speed:", f"[magenta]{format_size(int(avg_speed))}/s[/magenta]"
        )
    stats_table.add_row("Time Elapsed:", f"[blue]{format_duration(duration_s)}[/blue]")

    if stats.has_failures:
        title = "[bold]Finished With Errors[/bold]"
        border_color = "red"
    else:
        title = "[bold]Download Complete![/bold]"
        border_color = "green"

    console.print()
    console.print(
        Panel(
            stats_table,
            title=title,
            border_style=border_color,
            box=box.DOUBLE,
            expand=False,
            padding=(1, 2),
        )
    )
