r"""
Language loader — fetch, merge, retry with fallback, commit.

State machine of a single load:

    IDLE -> RESOLVING -> (FALLBACK_RETRY -> RESOLVING)* -> COMMITTED
                      \-> ABORTED   (async only: superseded by a newer load)

Retry chain when a tag yields no messages:
1. Swap separators once ("en-US" -> "en_US").
2. Load fallback_lang once.
3. Give up and commit the empty set under the last tried tag.

Invariants:
- The provider NEVER breaks a load: exceptions, None and non-mappings are
  logged and read as an empty message set.
- An aborted load never writes to the store and never raises.
- A language already in the store is committed again without calling the
  provider.
"""

import asyncio
import inspect
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable

import structlog

from .document import hyphenate
from .options import I18nOptions, MessageProvider
from .store import LanguageStore, LoadedLanguage, normalize_tag

logger = structlog.get_logger()

__all__ = ["Loader", "LoadState", "LoadAttempt", "CancelToken", "swap_separators"]

_SEPARATOR_RE = re.compile(r"[-_]")


class LoadState(Enum):
    """Where the loader stands in its current (or last) load."""

    IDLE = "idle"
    RESOLVING = "resolving"
    FALLBACK_RETRY = "fallback_retry"
    COMMITTED = "committed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class LoadAttempt:
    """One step of the retry chain."""

    tag: str
    alternate_separator_tried: bool = False
    fallback_tried: bool = False


class CancelToken:
    """Cancellation signal shared by every step of one async load."""

    def __init__(self) -> None:
        self._cancelled = False
        self._event: asyncio.Event | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        """Block until cancel() is called."""
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        await self._event.wait()


def swap_separators(tag: str) -> str:
    """Swap "-" and "_" ("en-US" <-> "en_US")."""
    return _SEPARATOR_RE.sub(lambda m: "_" if m.group() == "-" else "-", tag)


class Loader:
    """Loads languages into a LanguageStore.

    Args:
        store: Store receiving the committed languages.
        get_options: Returns the owner's current options. Called on every
            step so option updates apply to the next fetch.
    """

    def __init__(
        self,
        store: LanguageStore,
        get_options: Callable[[], I18nOptions],
    ) -> None:
        self._store = store
        self._get_options = get_options
        self.state = LoadState.IDLE
        self._log = logger.bind(component="i18n.loader")

    # ── Sync ────────────────────────────────────────────────────────────

    def load(self, tag: str, alternate_separator_tried: bool = False) -> str:
        """Load a language and make it active.

        Args:
            tag: Language tag to load.
            alternate_separator_tried: True if tag is already the swapped
                form of an earlier attempt.

        Returns:
            The tag the committed messages were stored under.
        """
        attempt = LoadAttempt(tag, alternate_separator_tried)
        self._log.debug("i18n.load.start", tag=tag, mode="sync")

        while True:
            cached = self._store.find(attempt.tag)
            if cached is not None:
                return self._commit_cached(cached)

            self.state = LoadState.RESOLVING
            messages = self._resolve(attempt.tag)

            retry = self._next_attempt(attempt, messages)
            if retry is None:
                return self._commit(attempt.tag, messages)
            attempt = retry

    def _resolve(self, tag: str) -> dict[str, Any]:
        options = self._get_options()
        messages = self._fetch(options.resolve, tag)
        if options.has_php_translations:
            supplemental = self._fetch(options.resolve, f"php_{tag}")
            messages = {**messages, **supplemental}
        return messages

    def _fetch(self, provider: MessageProvider, tag: str) -> dict[str, Any]:
        try:
            result = provider(tag)
        except Exception as e:
            self._log.warning("i18n.provider.failed", tag=tag, error=str(e))
            return {}

        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            self._log.warning("i18n.provider.awaitable_in_sync_load", tag=tag)
            return {}

        return self._coerce(result, tag)

    # ── Async ───────────────────────────────────────────────────────────

    async def load_async(
        self,
        tag: str,
        token: CancelToken,
        alternate_separator_tried: bool = False,
    ) -> str | None:
        """Load a language without blocking the event loop.

        Args:
            tag: Language tag to load.
            token: Cancellation signal; once cancelled, the load settles
                with None and leaves the store untouched.
            alternate_separator_tried: See load().

        Returns:
            The committed tag, or None if the load was cancelled.
        """
        attempt = LoadAttempt(tag, alternate_separator_tried)
        self._log.debug("i18n.load.start", tag=tag, mode="async")

        while True:
            if token.cancelled:
                return self._abort(attempt.tag)

            cached = self._store.find(attempt.tag)
            if cached is not None:
                return self._commit_cached(cached)

            self.state = LoadState.RESOLVING
            messages = await self._until_cancelled(self._resolve_async(attempt.tag), token)
            if messages is None:
                return self._abort(attempt.tag)

            retry = self._next_attempt(attempt, messages)
            if retry is None:
                return self._commit(attempt.tag, messages)
            attempt = retry

    async def _resolve_async(self, tag: str) -> dict[str, Any]:
        options = self._get_options()
        messages = await self._fetch_async(options.resolve, tag)
        if options.has_php_translations:
            supplemental = await self._fetch_async(options.resolve, f"php_{tag}")
            messages = {**messages, **supplemental}
        return messages

    async def _fetch_async(self, provider: MessageProvider, tag: str) -> dict[str, Any]:
        try:
            result = provider(tag)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            self._log.warning("i18n.provider.failed", tag=tag, error=str(e))
            return {}
        return self._coerce(result, tag)

    async def _until_cancelled(
        self,
        work: Awaitable[dict[str, Any]],
        token: CancelToken,
    ) -> dict[str, Any] | None:
        """Await work unless the token is cancelled first (then None)."""
        fetch = asyncio.ensure_future(work)
        aborted = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({fetch, aborted}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            fetch.cancel()
            raise
        finally:
            aborted.cancel()

        if token.cancelled:
            fetch.cancel()
            return None
        return fetch.result()

    def _abort(self, tag: str) -> None:
        self.state = LoadState.ABORTED
        self._log.debug("i18n.load.aborted", tag=tag)
        return None

    # ── Shared ──────────────────────────────────────────────────────────

    def _coerce(self, result: Any, tag: str) -> dict[str, Any]:
        if result is None:
            return {}
        if not isinstance(result, Mapping):
            self._log.warning(
                "i18n.provider.invalid_result",
                tag=tag,
                type=type(result).__name__,
            )
            return {}
        return dict(result)

    def _next_attempt(
        self,
        attempt: LoadAttempt,
        messages: Mapping[str, Any],
    ) -> LoadAttempt | None:
        """Decide the next step of the retry chain (None = commit now)."""
        if messages:
            return None

        if _SEPARATOR_RE.search(attempt.tag) and not attempt.alternate_separator_tried:
            retry = LoadAttempt(
                swap_separators(attempt.tag),
                alternate_separator_tried=True,
                fallback_tried=attempt.fallback_tried,
            )
            self._retry(attempt, retry, reason="alternate_separator")
            return retry

        fallback = self._get_options().fallback_lang
        if (
            not attempt.fallback_tried
            and fallback
            and normalize_tag(attempt.tag) != normalize_tag(fallback)
        ):
            retry = LoadAttempt(fallback, fallback_tried=True)
            self._retry(attempt, retry, reason="fallback")
            return retry

        self._log.info("i18n.load.exhausted", tag=attempt.tag)
        return None

    def _retry(self, attempt: LoadAttempt, retry: LoadAttempt, reason: str) -> None:
        self.state = LoadState.FALLBACK_RETRY
        self._log.debug(
            "i18n.load.retry",
            tag=attempt.tag,
            next_tag=retry.tag,
            reason=reason,
        )

    def _commit_cached(self, language: LoadedLanguage) -> str:
        self._log.debug("i18n.load.cache_hit", tag=language.tag)
        return self._commit(language.tag, language.messages)

    def _commit(self, tag: str, messages: Mapping[str, Any]) -> str:
        self._store.commit(tag, messages)

        options = self._get_options()
        options.lang = tag
        if options.document is not None:
            options.document.set_attribute("lang", hyphenate(tag))

        try:
            options.on_load(tag)
        except Exception as e:
            self._log.warning("i18n.on_load.failed", tag=tag, error=str(e))

        self.state = LoadState.COMMITTED
        self._log.info("i18n.load.committed", tag=tag, keys=len(messages))
        return tag
