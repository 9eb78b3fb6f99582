"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

import re

from pydantic import BaseModel, ConfigDict, field_validator

# A destination of a single dash streams the downloaded data to standard output.
STDOUT_PATH = "-"

_FACTORY_PATTERN = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_]\w*$")


class DownloadConfig(BaseModel):
    """A validated configuration model for the application."""

    # Download Settings
    path: str = "."
    no_progress: bool = False
    print_names: bool = False

    # Retry Settings
    max_attempts: int = 5
    initial_backoff: float = 2.0

    # Session backend, as 'package.module:callable'
    session_factory: str = ""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        if not v:
            raise ValueError("Download path cannot be empty.")
        return v

    @field_validator("max_attempts")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        """Ensures a reasonable number of attempts."""
        if v < 1 or v > 10:
            raise ValueError("Max attempts must be between 1 and 10.")
        return v

    @field_validator("initial_backoff")
    @classmethod
    def validate_backoff(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Initial backoff cannot be negative.")
        return v

    @field_validator("session_factory")
    @classmethod
    def validate_session_factory(cls, v: str) -> str:
        if v and not _FACTORY_PATTERN.match(v):
            raise ValueError(
                "Session factory must look like 'package.module:callable', "
                f"but got: {v}"
            )
        return v

    @property
    def stream(self) -> bool:
        """True when downloaded data goes to standard output."""
        return self.path == STDOUT_PATH

    @property
    def show_progress(self) -> bool:
        """Streaming to standard output never renders a progress bar."""
        return not (self.no_progress or self.stream)

    @property
    def show_names(self) -> bool:
        """Names are never printed in stream mode, standard output carries data."""
        return self.print_names and not self.stream

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        return set(cls.model_fields)
