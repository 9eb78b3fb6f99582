"""
megadl - download exported files and folders from mega.nz.

Single-file links are fetched directly; folder links are mirrored onto a local
directory tree without overwriting existing files. Transient transfer
failures are retried with exponential backoff.
"""

__version__ = "1.0.0"
