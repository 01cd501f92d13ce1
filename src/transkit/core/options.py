"""
Runtime options of an I18n instance.

Unlike AppConfig (which is read from YAML/env), I18nOptions carries live
objects: the message provider, the on_load callback and the document root.
"""

from collections.abc import Mapping
from typing import Any, Callable

from pydantic import BaseModel, Field

from .document import DocumentRoot

__all__ = ["I18nOptions", "MessageProvider", "merge_options"]

MessageProvider = Callable[[str], Any]


def _empty_provider(lang: str) -> dict[str, Any]:
    return {}


def _noop(lang: str) -> None:
    return None


class I18nOptions(BaseModel):
    """Options of an I18n instance."""

    lang: str | None = Field(
        default=None,
        description="Active language tag. None means use fallback_lang.",
    )
    fallback_lang: str = Field(
        default="en",
        description="Language loaded when the requested one yields no messages",
    )
    resolve: MessageProvider = Field(
        default=_empty_provider,
        description="Message provider: tag -> mapping, or an awaitable of one",
    )
    on_load: Callable[[str], Any] = Field(
        default=_noop,
        description="Called with the tag after every commit",
    )
    default_key_prefix: str | None = Field(
        default=None,
        description="Prefix stripped from keys that have no translation",
    )
    has_php_translations: bool = Field(
        default=False,
        description="If True, 'php_<tag>' is fetched too and merged over the primary set",
    )
    document: DocumentRoot | None = Field(
        default=None,
        description="UI root whose 'lang' attribute follows the active language",
    )

    model_config = {"extra": "forbid", "arbitrary_types_allowed": True}


def merge_options(
    current: I18nOptions,
    update: "I18nOptions | Mapping[str, Any] | None",
) -> I18nOptions:
    """Return new options with the fields present in update applied.

    Fields absent from update keep their current value. With an I18nOptions
    as update, only the fields explicitly set on it count as present.
    """
    if update is None:
        return current

    if isinstance(update, I18nOptions):
        changes = {name: getattr(update, name) for name in update.model_fields_set}
    else:
        changes = dict(update)

    merged = {name: getattr(current, name) for name in I18nOptions.model_fields}
    merged.update(changes)
    return I18nOptions(**merged)
