"""
Resolves and starts the configured session backend.
"""

import importlib
import inspect
import logging
from typing import Any, Callable

from megadl.exceptions import ConfigurationError, SessionError
from megadl.models.config import DownloadConfig

from .session import MegaSession

log = logging.getLogger(__name__)

SESSION_FACTORY_ENV = "MEGADL_SESSION_FACTORY"


def load_session_factory(dotted_path: str) -> Callable[[DownloadConfig], Any]:
    """
    Imports a session factory given as 'package.module:callable'.

    Raises:
        ConfigurationError: If the path is empty, malformed or cannot be imported.
    """
    if not dotted_path:
        raise ConfigurationError(
            "No session backend configured. Use --session, set "
            f"{SESSION_FACTORY_ENV} or add 'session_factory' to the config file."
        )

    module_name, sep, attr_name = dotted_path.partition(":")
    if not sep or not module_name or not attr_name:
        raise ConfigurationError(
            f"Invalid session factory '{dotted_path}'. "
            "Expected 'package.module:callable'."
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(
            f"Could not import session backend module '{module_name}': {e}"
        ) from e

    factory = getattr(module, attr_name, None)
    if not callable(factory):
        raise ConfigurationError(
            f"'{attr_name}' in module '{module_name}' is not a callable."
        )
    return factory


async def start_session(config: DownloadConfig) -> MegaSession:
    """Creates the session through the configured factory."""
    factory = load_session_factory(config.session_factory)
    log.debug(f"Starting session with factory '{config.session_factory}'")

    try:
        session = factory(config)
        if inspect.isawaitable(session):
            session = await session
    except (ConfigurationError, SessionError):
        raise
    except Exception as e:
        raise SessionError(f"Could not start session: {e}") from e

    if not isinstance(session, MegaSession):
        raise SessionError(
            f"Session factory '{config.session_factory}' returned "
            f"{type(session).__name__}, which does not implement the session interface."
        )
    return session
