"""
Parsing of exported Mega links into typed references.
"""

import re

from megadl.models.references import (
    FILE_KEY_LENGTH,
    FOLDER_KEY_LENGTH,
    HANDLE_LENGTH,
    FileRef,
    FolderRef,
    Reference,
)

_LINK_PREFIX = r"https?://mega(?:\.co)?\.nz/"

FILE_LINK_PATTERN = re.compile(
    _LINK_PREFIX
    + rf"#!(?P<handle>[a-z0-9_-]{{{HANDLE_LENGTH}}})!(?P<key>[a-z0-9_-]{{{FILE_KEY_LENGTH}}})",
    re.IGNORECASE,
)
FOLDER_LINK_PATTERN = re.compile(
    _LINK_PREFIX
    + rf"#F!(?P<handle>[a-z0-9_-]{{{HANDLE_LENGTH}}})!(?P<key>[a-z0-9_-]{{{FOLDER_KEY_LENGTH}}})",
    re.IGNORECASE,
)


def classify_link(link: str) -> Reference | None:
    """
    Parses an exported link into a FileRef or FolderRef.

    The file grammar is tried first, then the folder grammar. The whole string
    must match; handle and key are returned exactly as they appear in the link.

    Returns:
        The typed reference, or None when the link matches neither grammar.
    """
    if match := FILE_LINK_PATTERN.fullmatch(link):
        return FileRef(match.group("handle"), match.group("key"), link=link)
    if match := FOLDER_LINK_PATTERN.fullmatch(link):
        return FolderRef(match.group("handle"), match.group("key"), link=link)
    return None
