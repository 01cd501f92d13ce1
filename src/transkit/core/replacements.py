"""
Placeholder replacement for resolved messages.

A placeholder is a colon followed by the replacement name. Three case
variants are recognized for each name:

    :name  -> value as given
    :NAME  -> value upper-cased
    :Name  -> value with its first character upper-cased

Replacements are applied in mapping order, so a later replacement can rewrite
text inserted by an earlier one (e.g. a value containing ":count").
"""

from collections.abc import Mapping
from typing import Any

__all__ = ["make_replacements", "capitalize"]


def capitalize(text: str) -> str:
    """Upper-case the first character, leaving the rest untouched."""
    return text[:1].upper() + text[1:]


def make_replacements(message: str, replacements: Mapping[str, Any] | None) -> str:
    """Substitute placeholders in a message.

    Args:
        message: Resolved message text.
        replacements: Placeholder name -> value (converted with str()).

    Returns:
        The message with every placeholder variant replaced.
    """
    for key, raw_value in (replacements or {}).items():
        value = str(raw_value)
        message = (
            message.replace(f":{key}", value)
            .replace(f":{key.upper()}", value.upper())
            .replace(f":{capitalize(key)}", capitalize(value))
        )
    return message
