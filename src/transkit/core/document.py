"""
Document root — the UI element carrying the page's "lang" attribute.

The i18n core only needs two operations from the UI layer: read the initial
language and publish the active one. Any object with get_attribute() and
set_attribute() can play that role; MemoryDocument is the in-process version
used by the CLI and the tests.
"""

from typing import Protocol, runtime_checkable

__all__ = ["DocumentRoot", "MemoryDocument", "hyphenate"]


@runtime_checkable
class DocumentRoot(Protocol):
    """Root element of the UI document."""

    def get_attribute(self, name: str) -> str | None: ...

    def set_attribute(self, name: str, value: str) -> None: ...


class MemoryDocument:
    """DocumentRoot backed by a plain dict of attributes."""

    def __init__(self, lang: str | None = None) -> None:
        self.attributes: dict[str, str] = {}
        if lang:
            self.attributes["lang"] = lang

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(name)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def __repr__(self) -> str:
        return f"<MemoryDocument({self.attributes!r})>"


def hyphenate(tag: str) -> str:
    """HTML lang attributes use "-" ("pt_BR" -> "pt-BR")."""
    return tag.replace("_", "-")
