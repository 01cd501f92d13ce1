"""
I18n — translation facade with a process-wide shared instance.

Ties the core together:
    trans()        -> KeyResolver -> make_replacements()
    trans_choice() -> KeyResolver -> choose() -> make_replacements()
    load_*()       -> Loader -> LanguageStore.commit()

The shared instance is a convenience over an ordinary object: tests and
embedding applications can build isolated instances with I18n.new_instance().
"""

import asyncio
import threading
from collections.abc import Coroutine, Mapping
from typing import Any

import structlog

from ..core.document import DocumentRoot
from ..core.loader import CancelToken, Loader
from ..core.observable import Computed
from ..core.options import I18nOptions, merge_options
from ..core.pluralization import choose
from ..core.replacements import make_replacements
from ..core.resolver import KeyResolver
from ..core.store import LanguageStore

logger = structlog.get_logger()

Translation = str | list[str]
Replacements = Mapping[str, Any]


def format_count(number: float) -> str:
    """Render a count for the :count placeholder (2.0 -> "2", 1.5 -> "1.5")."""
    if isinstance(number, float) and number.is_integer():
        return str(int(number))
    return str(number)


class I18n:
    """Encapsulates language loading and translation.

    Usage:
        i18n = I18n.get_shared_instance({"lang": "es", "resolve": provider})
        i18n.trans("auth.failed")
        i18n.trans_choice("cart.items", 3)
        await i18n.load_language_async("fr")
    """

    _shared: "I18n | None" = None
    _lock = threading.RLock()

    def __init__(self, options: I18nOptions | Mapping[str, Any] | None = None) -> None:
        self.options = merge_options(I18nOptions(), options)
        self._lang_from_document(self.options.document)

        self.store = LanguageStore()
        self._resolver = KeyResolver(self.store.active)
        self._loader = Loader(self.store, lambda: self.options)
        self._cancel_token: CancelToken | None = None
        self.pending_load: asyncio.Future[str | None] | None = None
        self._log = logger.bind(component="i18n")

        self.load()

    # ── Shared instance ─────────────────────────────────────────────────

    @classmethod
    def get_shared_instance(
        cls,
        options: I18nOptions | Mapping[str, Any] | None = None,
        force_load: bool = False,
    ) -> "I18n":
        """Get the shared instance, creating it on first use.

        Args:
            options: Options merged field-by-field into the instance.
            force_load: If True and the instance exists, reload the active
                language after applying options.
        """
        with cls._lock:
            if cls._shared is not None:
                return cls._shared.set_options(options, force_load)
            cls._shared = cls(options)
            return cls._shared

    @classmethod
    def new_instance(cls, options: I18nOptions | Mapping[str, Any] | None = None) -> "I18n":
        """Build an instance independent from the shared one."""
        return cls(options)

    @classmethod
    def has_shared_instance(cls) -> bool:
        return cls._shared is not None

    # ── Options & loading ───────────────────────────────────────────────

    def set_options(
        self,
        options: I18nOptions | Mapping[str, Any] | None = None,
        force_load: bool = False,
    ) -> "I18n":
        """Apply options, keeping every field they do not mention."""
        self.options = merge_options(self.options, options)
        if force_load:
            self.load()
        return self

    def load(self) -> None:
        """Load the active language.

        Inside a running event loop the load is scheduled asynchronously
        (see pending_load); otherwise it completes before returning.
        """
        lang = self.get_active_language()
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self.load_language(lang)
            return
        self.pending_load = asyncio.ensure_future(self.load_language_async(lang))

    def load_language(self, lang: str, dash_lang_try: bool = False) -> str:
        """Load a language synchronously and make it active.

        Returns:
            The tag the messages were committed under.
        """
        return self._loader.load(lang, alternate_separator_tried=dash_lang_try)

    def load_language_async(
        self,
        lang: str,
        dash_lang_try: bool = False,
    ) -> Coroutine[Any, Any, str | None]:
        """Load a language asynchronously, superseding any load in flight.

        The previous load is cancelled as soon as this method is called, not
        when the returned coroutine starts running.

        Returns:
            Coroutine resolving to the committed tag, or None if a newer load
            superseded this one.
        """
        if self._cancel_token is not None:
            self._cancel_token.cancel()
        token = self._cancel_token = CancelToken()
        return self._loader.load_async(lang, token, alternate_separator_tried=dash_lang_try)

    def is_loaded(self, lang: str | None = None) -> bool:
        """Check whether a language (default: the active one) is loaded."""
        return self.store.is_loaded(lang or self.get_active_language())

    def get_active_language(self) -> str:
        return self.options.lang or self.options.fallback_lang

    def reset(self) -> None:
        """Forget loaded languages and options.

        Active keys are tombstoned, not removed, so bound values update. If
        this is the shared instance, the next get_shared_instance() builds a
        fresh one.
        """
        if self._cancel_token is not None:
            self._cancel_token.cancel()
            self._cancel_token = None

        self.store.reset()
        self.options = I18nOptions()

        cls = type(self)
        with cls._lock:
            if cls._shared is self:
                cls._shared = None
        self._log.debug("i18n.reset")

    # ── Translation ─────────────────────────────────────────────────────

    def trans(self, key: str, replacements: Replacements | None = None) -> Translation:
        """Get the translation for a key.

        Missing keys return the key itself (minus default_key_prefix).
        """
        return self._translate(key, replacements)

    def w_trans(self, key: str, replacements: Replacements | None = None) -> Computed[Translation]:
        """Like trans(), as a Computed that follows language changes."""
        return Computed(lambda: self._translate(key, replacements), self.store.active)

    def trans_choice(
        self,
        key: str,
        number: float,
        replacements: Replacements | None = None,
    ) -> Translation:
        """Translate a pluralized message for a count.

        A "count" replacement holding the number is always added.
        """
        return self._translate_choice(key, number, replacements)

    def w_trans_choice(
        self,
        key: str,
        number: float,
        replacements: Replacements | None = None,
    ) -> Computed[Translation]:
        """Like trans_choice(), as a Computed that follows language changes."""
        return Computed(
            lambda: self._translate_choice(key, number, replacements),
            self.store.active,
        )

    def _translate(self, key: str, replacements: Replacements | None) -> Translation:
        message = self._resolver.resolve(key, self.options.default_key_prefix)
        if isinstance(message, list):
            return [make_replacements(_as_text(item), replacements) for item in message]
        return make_replacements(_as_text(message), replacements)

    def _translate_choice(
        self,
        key: str,
        number: float,
        replacements: Replacements | None,
    ) -> Translation:
        replacements = {**(replacements or {}), "count": format_count(number)}
        lang = self.get_active_language()

        message = self._resolver.resolve(key, self.options.default_key_prefix)
        if isinstance(message, list):
            return [
                make_replacements(choose(_as_text(item), number, lang), replacements)
                for item in message
            ]
        return make_replacements(choose(_as_text(message), number, lang), replacements)

    # ── Helpers ─────────────────────────────────────────────────────────

    def _lang_from_document(self, document: DocumentRoot | None) -> None:
        if self.options.lang or document is None:
            return
        lang = document.get_attribute("lang")
        if lang:
            self.options.lang = lang.replace("-", "_")

    def __repr__(self) -> str:
        return (
            f"<I18n(lang='{self.get_active_language()}', "
            f"loaded={[language.tag for language in self.store.loaded]})>"
        )


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)
