"""
Shared-instance translation API.

Public API:
    trans(key, replacements)                 — Translate a key.
    t(key, **replacements)                   — Shorthand for trans().
    trans_choice(key, number, replacements)  — Translate with pluralization.
    w_trans(...) / w_trans_choice(...)       — Same, as reactive Computed values.
    load_language(lang)                      — Load a language synchronously.
    load_language_async(lang)                — Load a language asynchronously.
    is_loaded(lang)                          — Check if a language is loaded.
    get_active_language()                    — Current language tag.
    reset()                                  — Drop all loaded data.

Usage:
    from transkit.i18n import I18n, trans, trans_choice

    I18n.get_shared_instance({"lang": "es", "resolve": provider})
    print(trans("greeting", {"name": "Ana"}))
    print(trans_choice("cart.items", 3))
"""

from collections.abc import Coroutine
from typing import Any

from ..core.observable import Computed
from .factory import build_options, create_i18n
from .registry import I18n, Replacements, Translation, format_count

__all__ = [
    "I18n",
    "build_options",
    "create_i18n",
    "format_count",
    "get_active_language",
    "is_loaded",
    "load_language",
    "load_language_async",
    "reset",
    "t",
    "trans",
    "trans_choice",
    "w_trans",
    "w_trans_choice",
]


def is_loaded(lang: str | None = None) -> bool:
    return I18n.get_shared_instance().is_loaded(lang)


def load_language(lang: str, dash_lang_try: bool = False) -> str:
    return I18n.get_shared_instance().load_language(lang, dash_lang_try)


def load_language_async(lang: str, dash_lang_try: bool = False) -> Coroutine[Any, Any, str | None]:
    return I18n.get_shared_instance().load_language_async(lang, dash_lang_try)


def trans(key: str, replacements: Replacements | None = None) -> Translation:
    """Translate a key with optional :placeholder replacements.

    Args:
        key: Translation key (e.g. "auth.failed" or "auth/failed").
        replacements: Placeholder name -> value.

    Returns:
        Translated string, a list for list-like keys, or the key itself.
    """
    return I18n.get_shared_instance().trans(key, replacements)


def t(key: str, **replacements: object) -> Translation:
    """Shorthand for trans() taking replacements as keyword arguments."""
    return I18n.get_shared_instance().trans(key, replacements)


def w_trans(key: str, replacements: Replacements | None = None) -> Computed[Translation]:
    return I18n.get_shared_instance().w_trans(key, replacements)


def trans_choice(
    key: str,
    number: float,
    replacements: Replacements | None = None,
) -> Translation:
    """Translate a pluralized message; :count is replaced by number."""
    return I18n.get_shared_instance().trans_choice(key, number, replacements)


def w_trans_choice(
    key: str,
    number: float,
    replacements: Replacements | None = None,
) -> Computed[Translation]:
    return I18n.get_shared_instance().w_trans_choice(key, number, replacements)


def get_active_language() -> str:
    return I18n.get_shared_instance().get_active_language()


def reset() -> None:
    """Reset the shared instance, if one exists. Never creates one."""
    shared = I18n._shared
    if shared is not None:
        shared.reset()
