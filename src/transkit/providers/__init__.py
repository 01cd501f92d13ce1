"""
Providers module - Message sources for the loader.

A provider is any callable tag -> message set (or an awaitable of one).
"""

from .json_files import JsonDirectoryProvider, detect_php_translations, flatten_messages

__all__ = [
    "JsonDirectoryProvider",
    "detect_php_translations",
    "flatten_messages",
]
