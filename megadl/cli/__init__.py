"""
Command-line Layer.

This package contains the Typer application, the progress reporter and the
Rich formatters used for console output.
"""
