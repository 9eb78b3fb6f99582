"""
Storage Layer.

This package handles loading of the configuration file.
"""

from .config_manager import ConfigManager

__all__ = ["ConfigManager"]
