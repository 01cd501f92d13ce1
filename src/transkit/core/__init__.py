"""
Core module - Translation engine.

Components:
- pluralization: choose() for pipe-delimited plural messages
- plural_rules: get_plural_index() per language family
- replacements: make_replacements() for :placeholder substitution
- resolver: KeyResolver for dot/slash keys and list-like groups
- store: LanguageStore with the observable active message set
- loader: Loader state machine with fallback retries and cancellation
"""

from .document import DocumentRoot, MemoryDocument
from .loader import CancelToken, LoadAttempt, Loader, LoadState
from .observable import Computed, ObservableDict
from .options import I18nOptions, merge_options
from .plural_rules import get_plural_index
from .pluralization import choose
from .replacements import make_replacements
from .resolver import KeyResolver, resolve_key
from .store import LanguageStore, LoadedLanguage

__all__ = [
    "CancelToken",
    "Computed",
    "DocumentRoot",
    "I18nOptions",
    "KeyResolver",
    "LanguageStore",
    "LoadAttempt",
    "LoadState",
    "LoadedLanguage",
    "Loader",
    "MemoryDocument",
    "ObservableDict",
    "choose",
    "get_plural_index",
    "make_replacements",
    "merge_options",
    "resolve_key",
]
