"""
Main entry point for the megadl application.
This module handles top-level setup, exception handling, and CLI invocation.
"""

import asyncio
import logging
import os
import sys

import typer
from rich.console import Console

from megadl.cli.app import app
from megadl.cli.formatters import format_error_with_suggestions
from megadl.exceptions import MegadlError


def main() -> None:
    """Main entry point function."""
    if os.name == "nt":
        try:
            sys.stderr.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass

    log = logging.getLogger("megadl")
    console = Console(stderr=True)

    try:
        app()
    except typer.Abort:
        sys.exit(1)
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        sys.exit(130)
    except MegadlError as e:
        console.print(format_error_with_suggestions(e))
        sys.exit(1)
    except Exception as e:
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
