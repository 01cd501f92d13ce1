"""
Language store — loaded languages and the active message set.

The store holds:
- loaded: ordered list of LoadedLanguage, append-only until reset()
- active: ObservableDict with the messages of the last committed language

Only the Loader writes to the store. Keys are never removed from the active
set; a key missing from the newly committed language is set to None so that
bound observers see the removal as a value change.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

import structlog

from .observable import ObservableDict

logger = structlog.get_logger()

__all__ = ["LoadedLanguage", "LanguageStore", "normalize_tag"]


def normalize_tag(tag: str) -> str:
    """Canonical form for tag comparison ("en_US" and "en-US" are equal)."""
    return tag.replace("_", "-")


@dataclass(frozen=True)
class LoadedLanguage:
    """A language whose messages were fetched once.

    Immutable: the tag and the messages mapping never change after creation.
    """

    tag: str
    messages: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "messages", MappingProxyType(dict(self.messages)))

    def __repr__(self) -> str:
        return f"<LoadedLanguage(tag='{self.tag}', keys={len(self.messages)})>"


class LanguageStore:
    """Holds loaded languages and the active, observable message set."""

    def __init__(self) -> None:
        self.loaded: list[LoadedLanguage] = []
        self.active = ObservableDict()
        self._log = logger.bind(component="i18n.store")

    def find(self, tag: str) -> LoadedLanguage | None:
        """Return the loaded entry whose tag matches, ignoring - vs _."""
        wanted = normalize_tag(tag)
        for language in self.loaded:
            if normalize_tag(language.tag) == wanted:
                return language
        return None

    def is_loaded(self, tag: str) -> bool:
        return self.find(tag) is not None

    def commit(self, tag: str, messages: Mapping[str, Any]) -> LoadedLanguage:
        """Make a language's messages the active set.

        Every key of messages is written into the active set; every other
        active key is tombstoned. The language is appended to the loaded list
        unless an entry with the same tag already exists.

        Args:
            tag: Language tag the messages belong to.
            messages: The language's message set.

        Returns:
            The stored LoadedLanguage (the existing one on a cache hit).
        """
        language = self.find(tag)
        if language is None:
            language = LoadedLanguage(tag=tag, messages=messages)
            self.loaded.append(language)

        for key, value in messages.items():
            self.active[key] = value

        stale = [key for key in self.active if key not in messages]
        for key in stale:
            if self.active[key] is not None:
                self.active[key] = None

        self._log.debug(
            "i18n.store.committed",
            tag=tag,
            keys=len(messages),
            tombstoned=len(stale),
        )
        return language

    def reset(self) -> None:
        """Forget every loaded language and tombstone every active key."""
        self.loaded.clear()
        for key in list(self.active):
            self.active[key] = None
        self._log.debug("i18n.store.reset", keys=len(self.active))
