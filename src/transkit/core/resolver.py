"""
Key resolution against the active message set.

Lookup rules, in order:
1. The key as given ("auth.failed").
2. If neither the key nor "<key>.0" exists, "/" is read as "." ("auth/failed").
3. If "<key>.0" exists, the key names a list: every value under "<key>." is
   returned, in mapping order ("validation.rules" -> ["...", "..."]).
4. Otherwise the key is its own display text, minus default_key_prefix.

A None value is a tombstone left by a language switch and counts as absent.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from .observable import ObservableDict

logger = structlog.get_logger()

__all__ = ["KeyResolver", "resolve_key", "collect_group"]

Resolved = str | list[str]


def _present(messages: Mapping[str, Any], key: str) -> bool:
    return messages.get(key) is not None


def collect_group(key: str, messages: Mapping[str, Any]) -> list[str]:
    """Return every live value whose key starts with "<key>."."""
    prefix = f"{key}."
    return [
        value
        for item_key, value in messages.items()
        if item_key.startswith(prefix) and value is not None
    ]


def resolve_key(
    key: str,
    messages: Mapping[str, Any],
    default_key_prefix: str | None = None,
) -> Resolved:
    """Resolve a translation key without caching.

    Args:
        key: Translation key, dot or slash separated.
        messages: The active message set.
        default_key_prefix: Prefix stripped from keys that are not found.

    Returns:
        The message, the list of grouped messages, or the fallback text.
    """
    if not _present(messages, key) and not _present(messages, f"{key}.0"):
        key = key.replace("/", ".")

    if _present(messages, key):
        return messages[key]

    if _present(messages, f"{key}.0"):
        return collect_group(key, messages)

    if default_key_prefix and key.startswith(default_key_prefix):
        return key[len(default_key_prefix):]
    return key


class KeyResolver:
    """Caching resolver bound to an observable message set.

    Grouped (list-like) results are cached so repeated lookups do not scan
    the message set again. Any write to the message set drops the cache.
    """

    def __init__(self, messages: ObservableDict) -> None:
        self._messages = messages
        self._groups: dict[str, list[str]] = {}
        self._messages.subscribe(self._on_change)
        self._log = logger.bind(component="i18n.resolver")

    def resolve(self, key: str, default_key_prefix: str | None = None) -> Resolved:
        cached = self._groups.get(key)
        if cached is not None:
            return list(cached)

        result = resolve_key(key, self._messages, default_key_prefix)
        if isinstance(result, list):
            self._groups[key] = result
            self._log.debug("i18n.resolver.group_cached", key=key, items=len(result))
            return list(result)
        return result

    def _on_change(self, key: str, old: Any, new: Any) -> None:
        if self._groups:
            self._groups.clear()
