"""
Tests for the language loader state machine.

Covers:
- Cache hits (provider not called again)
- Separator swap and fallback retries, exhaustion
- Provider failures (exceptions, None, non-mappings, awaitables in sync mode)
- Supplemental (php_) merge order
- Commit side effects (options.lang, on_load, document lang)
- Async loading and cancellation
"""

import asyncio
import warnings
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from transkit.core import loader as loader_module
from transkit.core.document import MemoryDocument
from transkit.core.loader import CancelToken, Loader, LoadState, swap_separators
from transkit.core.options import I18nOptions
from transkit.core.store import LanguageStore


def make_loader(**options) -> tuple[Loader, LanguageStore, I18nOptions]:
    store = LanguageStore()
    opts = I18nOptions(**options)
    return Loader(store, lambda: opts), store, opts


def table_provider(table: dict) -> MagicMock:
    """Provider returning table[tag] (or {}) and recording calls."""
    return MagicMock(side_effect=lambda tag: table.get(tag, {}))


# ── Sync loading ────────────────────────────────────────────────────────


class TestSyncLoad:
    def test_load_commits_messages(self):
        provider = table_provider({"es": {"hello": "Hola"}})
        loader, store, opts = make_loader(resolve=provider)

        assert loader.load("es") == "es"
        assert store.active["hello"] == "Hola"
        assert opts.lang == "es"
        assert loader.state == LoadState.COMMITTED

    def test_second_load_is_a_cache_hit(self):
        provider = table_provider({"es": {"hello": "Hola"}, "en": {"hello": "Hello"}})
        loader, store, _ = make_loader(resolve=provider)

        loader.load("es")
        first = dict(store.active)
        loader.load("en")
        loader.load("es")

        assert provider.call_count == 2
        assert dict(store.active) == first

    def test_cache_hit_ignores_separator(self):
        provider = table_provider({"pt_BR": {"hello": "Olá"}})
        loader, store, _ = make_loader(resolve=provider)

        loader.load("pt_BR")
        assert loader.load("pt-BR") == "pt_BR"
        assert provider.call_count == 1

    def test_separator_swap_retry(self):
        provider = table_provider({"en_US": {"color": "color"}})
        loader, store, _ = make_loader(resolve=provider)

        assert loader.load("en-US") == "en_US"
        assert [c.args[0] for c in provider.call_args_list] == ["en-US", "en_US"]
        assert store.active["color"] == "color"

    def test_falls_back_after_separator_swap(self):
        provider = table_provider({"en": {"hello": "Hello"}})
        loader, store, _ = make_loader(resolve=provider)

        assert loader.load("en-US") == "en"
        assert [c.args[0] for c in provider.call_args_list] == ["en-US", "en_US", "en"]
        assert store.active["hello"] == "Hello"

    def test_exhausted_chain_commits_empty_set(self):
        provider = table_provider({})
        loader, store, opts = make_loader(resolve=provider, fallback_lang="en")

        assert loader.load("fr") == "en"
        assert [c.args[0] for c in provider.call_args_list] == ["fr", "en"]
        assert store.is_loaded("en")
        assert opts.lang == "en"

    def test_exhausted_chain_tombstones_previous_language(self):
        provider = table_provider({"de": {"hello": "Hallo"}})
        loader, store, _ = make_loader(resolve=provider, fallback_lang="en")

        loader.load("de")
        loader.load("fr")
        assert "hello" in store.active
        assert store.active["hello"] is None

    def test_fallback_with_separator_terminates(self):
        provider = table_provider({})
        loader, _, _ = make_loader(resolve=provider, fallback_lang="pt-BR")

        assert loader.load("fr") == "pt_BR"
        assert [c.args[0] for c in provider.call_args_list] == ["fr", "pt-BR", "pt_BR"]

    def test_fallback_served_from_cache(self):
        provider = table_provider({"en": {"hello": "Hello"}})
        loader, store, _ = make_loader(resolve=provider)

        loader.load("en")
        assert loader.load("fr") == "en"
        assert [c.args[0] for c in provider.call_args_list] == ["en", "fr"]

    def test_alternate_separator_flag_skips_swap(self):
        provider = table_provider({"en": {"a": "1"}})
        loader, _, _ = make_loader(resolve=provider)

        loader.load("en_US", alternate_separator_tried=True)
        assert [c.args[0] for c in provider.call_args_list] == ["en_US", "en"]


class TestProviderFailures:
    def test_exception_is_treated_as_empty(self):
        def provider(tag):
            if tag == "fr":
                raise FileNotFoundError("fr.json")
            return {"hello": "Hello"}

        loader, store, _ = make_loader(resolve=provider)
        assert loader.load("fr") == "en"
        assert store.active["hello"] == "Hello"

    @pytest.mark.parametrize("result", [None, ["not", "a", "mapping"], "text"])
    def test_invalid_results_are_treated_as_empty(self, result):
        loader, store, _ = make_loader(resolve=lambda tag: result)
        assert loader.load("en") == "en"
        assert len(store.active) == 0

    def test_awaitable_in_sync_load_is_treated_as_empty(self):
        calls = []

        async def provider(tag):
            calls.append(tag)
            return {"hello": "Hello"}

        loader, store, _ = make_loader(resolve=provider)
        assert loader.load("en") == "en"
        assert len(store.active) == 0
        # The coroutine was closed without running
        assert calls == []


class TestSupplementalSource:
    def test_supplemental_wins_on_conflict(self):
        provider = table_provider({
            "en": {"a": "json", "b": "json"},
            "php_en": {"b": "php", "c": "php"},
        })
        loader, store, _ = make_loader(resolve=provider, has_php_translations=True)

        loader.load("en")
        assert dict(store.active) == {"a": "json", "b": "php", "c": "php"}
        assert [c.args[0] for c in provider.call_args_list] == ["en", "php_en"]

    def test_supplemental_alone_counts_as_messages(self):
        provider = table_provider({"php_de": {"a": "php"}})
        loader, store, _ = make_loader(resolve=provider, has_php_translations=True)

        assert loader.load("de") == "de"
        assert store.active["a"] == "php"

    def test_supplemental_not_fetched_when_disabled(self):
        provider = table_provider({"en": {"a": "json"}, "php_en": {"b": "php"}})
        loader, store, _ = make_loader(resolve=provider)

        loader.load("en")
        assert "b" not in store.active


class TestCommitSideEffects:
    def test_on_load_called_with_tag(self):
        on_load = MagicMock()
        loader, _, _ = make_loader(resolve=table_provider({"es": {"a": "1"}}), on_load=on_load)

        loader.load("es")
        on_load.assert_called_once_with("es")

    def test_on_load_failure_does_not_break_load(self):
        def on_load(tag):
            raise RuntimeError("boom")

        loader, store, _ = make_loader(resolve=table_provider({"es": {"a": "1"}}), on_load=on_load)
        assert loader.load("es") == "es"
        assert store.active["a"] == "1"

    def test_document_lang_is_hyphenated(self):
        document = MemoryDocument()
        loader, _, _ = make_loader(
            resolve=table_provider({"pt_BR": {"a": "1"}}),
            document=document,
        )

        loader.load("pt_BR")
        assert document.get_attribute("lang") == "pt-BR"


def test_swap_separators():
    assert swap_separators("en-US") == "en_US"
    assert swap_separators("zh_Hant-TW") == "zh-Hant_TW"
    assert swap_separators("en") == "en"


# ── Async loading ───────────────────────────────────────────────────────


class TestAsyncLoad:
    @pytest.mark.asyncio
    async def test_async_provider(self):
        async def provider(tag):
            await asyncio.sleep(0)
            return {"hello": "Hola"} if tag == "es" else {}

        loader, store, _ = make_loader(resolve=provider)
        assert await loader.load_async("es", CancelToken()) == "es"
        assert store.active["hello"] == "Hola"

    @pytest.mark.asyncio
    async def test_sync_provider_in_async_load(self):
        loader, store, _ = make_loader(resolve=table_provider({"es": {"hello": "Hola"}}))
        assert await loader.load_async("es", CancelToken()) == "es"
        assert store.active["hello"] == "Hola"

    @pytest.mark.asyncio
    async def test_async_failure_falls_back(self):
        async def provider(tag):
            if tag == "fr":
                raise ConnectionError("offline")
            return {"hello": "Hello"}

        loader, store, _ = make_loader(resolve=provider)
        assert await loader.load_async("fr", CancelToken()) == "en"
        assert store.active["hello"] == "Hello"

    @pytest.mark.asyncio
    async def test_async_cache_hit(self):
        provider = table_provider({"es": {"hello": "Hola"}})
        loader, _, _ = make_loader(resolve=provider)

        await loader.load_async("es", CancelToken())
        await loader.load_async("es", CancelToken())
        assert provider.call_count == 1

    @pytest.mark.asyncio
    async def test_async_supplemental_merge(self):
        async def provider(tag):
            return {"en": {"a": "json", "b": "json"}, "php_en": {"b": "php"}}.get(tag, {})

        loader, store, _ = make_loader(resolve=provider, has_php_translations=True)
        await loader.load_async("en", CancelToken())
        assert dict(store.active) == {"a": "json", "b": "php"}

    @pytest.mark.asyncio
    async def test_cancelled_before_start(self):
        provider = table_provider({"es": {"hello": "Hola"}})
        loader, store, _ = make_loader(resolve=provider)

        token = CancelToken()
        token.cancel()
        assert await loader.load_async("es", token) is None
        assert len(store.active) == 0
        assert loader.state == LoadState.ABORTED
        provider.assert_not_called()

    @pytest.mark.asyncio
    async def test_cancel_while_fetching(self):
        gate = asyncio.Event()

        async def provider(tag):
            await gate.wait()
            return {"hello": "Hola"}

        loader, store, _ = make_loader(resolve=provider)
        token = CancelToken()
        task = asyncio.ensure_future(loader.load_async("es", token))
        await asyncio.sleep(0)

        token.cancel()
        assert await task is None
        assert len(store.active) == 0
        assert store.loaded == []


def test_module_source_compiles_without_warnings():
    source = Path(loader_module.__file__).read_text(encoding="utf-8")
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        compile(source, loader_module.__file__, "exec")
