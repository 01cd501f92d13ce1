"""
Configuration module for transkit.

Exports the main components for convenient imports.
"""

from .loader import load_config
from .schema import AppConfig, I18nConfig, LoggingConfig

__all__ = [
    "load_config",
    "AppConfig",
    "I18nConfig",
    "LoggingConfig",
]
