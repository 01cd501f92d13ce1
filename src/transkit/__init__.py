"""
transkit — translation keys to localized, interpolated strings.

    from transkit import I18n, trans, trans_choice

    I18n.get_shared_instance({"lang": "es", "resolve": provider})
    trans("auth.failed")                       # "Estas credenciales no coinciden."
    trans_choice("cart.items", 3)              # "3 artículos"
"""

from .core.document import MemoryDocument
from .core.observable import Computed, ObservableDict
from .core.options import I18nOptions
from .i18n import (
    I18n,
    create_i18n,
    get_active_language,
    is_loaded,
    load_language,
    load_language_async,
    reset,
    t,
    trans,
    trans_choice,
    w_trans,
    w_trans_choice,
)

__version__ = "0.4.0"

__all__ = [
    "Computed",
    "I18n",
    "I18nOptions",
    "MemoryDocument",
    "ObservableDict",
    "create_i18n",
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
