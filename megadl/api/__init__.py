"""
Session Layer.

This package defines the interface of the remote session backend and loads
the configured implementation.
"""

from .factory import SESSION_FACTORY_ENV, load_session_factory, start_session
from .session import MegaSession, StatusCallback

__all__ = [
    "MegaSession",
    "SESSION_FACTORY_ENV",
    "StatusCallback",
    "load_session_factory",
    "start_session",
]
