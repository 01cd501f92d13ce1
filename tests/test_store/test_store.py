"""Tests for LanguageStore and the observable primitives behind it."""

import gc

import pytest

from transkit.core.observable import Computed, ObservableDict
from transkit.core.store import LanguageStore, LoadedLanguage, normalize_tag


@pytest.fixture
def store() -> LanguageStore:
    return LanguageStore()


# ── LanguageStore ───────────────────────────────────────────────────────


class TestLanguageStore:
    def test_commit_writes_messages_and_appends(self, store: LanguageStore):
        store.commit("en", {"hello": "Hello", "bye": "Bye"})
        assert dict(store.active) == {"hello": "Hello", "bye": "Bye"}
        assert [language.tag for language in store.loaded] == ["en"]

    def test_commit_tombstones_absent_keys(self, store: LanguageStore):
        store.commit("en", {"hello": "Hello", "bye": "Bye"})
        store.commit("es", {"hello": "Hola"})

        assert "bye" in store.active
        assert store.active["bye"] is None
        assert store.active["hello"] == "Hola"

    def test_recommit_does_not_append_twice(self, store: LanguageStore):
        store.commit("en_US", {"a": "1"})
        store.commit("en-US", {"a": "1"})
        assert len(store.loaded) == 1
        assert store.loaded[0].tag == "en_US"

    def test_is_loaded_ignores_separator(self, store: LanguageStore):
        store.commit("pt_BR", {"a": "1"})
        assert store.is_loaded("pt-BR")
        assert store.is_loaded("pt_BR")
        assert not store.is_loaded("pt")

    def test_find_returns_entry(self, store: LanguageStore):
        store.commit("fr", {"a": "1"})
        found = store.find("fr")
        assert isinstance(found, LoadedLanguage)
        assert found.messages["a"] == "1"
        assert store.find("de") is None

    def test_reset_keeps_keys_as_tombstones(self, store: LanguageStore):
        store.commit("en", {"hello": "Hello", "bye": "Bye"})
        store.reset()

        assert store.loaded == []
        assert set(store.active) == {"hello", "bye"}
        assert all(value is None for value in store.active.values())

    def test_observers_see_removal(self, store: LanguageStore):
        store.commit("en", {"hello": "Hello", "bye": "Bye"})
        seen = []
        store.active.subscribe(lambda key, old, new: seen.append((key, old, new)))

        store.commit("es", {"hello": "Hola"})

        assert ("hello", "Hello", "Hola") in seen
        assert ("bye", "Bye", None) in seen


class TestLoadedLanguage:
    def test_messages_are_read_only(self):
        language = LoadedLanguage("en", {"a": "1"})
        with pytest.raises(TypeError):
            language.messages["a"] = "2"  # type: ignore[index]

    def test_tag_is_frozen(self):
        language = LoadedLanguage("en", {})
        with pytest.raises(AttributeError):
            language.tag = "es"  # type: ignore[misc]

    def test_source_dict_changes_do_not_leak(self):
        source = {"a": "1"}
        language = LoadedLanguage("en", source)
        source["a"] = "changed"
        assert language.messages["a"] == "1"

    def test_normalize_tag(self):
        assert normalize_tag("en_US") == normalize_tag("en-US") == "en-US"


# ── ObservableDict / Computed ───────────────────────────────────────────


class TestObservableDict:
    def test_subscribe_and_unsubscribe(self):
        data = ObservableDict()
        seen = []
        unsubscribe = data.subscribe(lambda key, old, new: seen.append((key, old, new)))

        data["a"] = "1"
        data["a"] = "2"
        unsubscribe()
        data["a"] = "3"

        assert seen == [("a", None, "1"), ("a", "1", "2")]

    def test_delete_is_not_allowed(self):
        data = ObservableDict({"a": "1"})
        with pytest.raises(TypeError, match="tombstone"):
            del data["a"]

    def test_mapping_protocol(self):
        data = ObservableDict({"a": "1", "b": None})
        assert len(data) == 2
        assert data.get("b") is None
        assert data.get("c", "x") == "x"
        assert list(data) == ["a", "b"]


class TestComputed:
    def test_value_is_cached_until_source_changes(self):
        data = ObservableDict({"greeting": "Hello"})
        calls = []

        def getter():
            calls.append(1)
            return data.get("greeting")

        computed = Computed(getter, data)
        assert computed.value == "Hello"
        assert computed.value == "Hello"
        assert len(calls) == 1

        data["greeting"] = "Hola"
        assert computed.value == "Hola"
        assert len(calls) == 2

    def test_subscribers_are_notified(self):
        data = ObservableDict({"greeting": "Hello"})
        computed = Computed(lambda: data.get("greeting"), data)
        notified = []
        computed.subscribe(lambda c: notified.append(c.value))

        data["greeting"] = "Bonjour"
        assert notified == ["Bonjour"]

    def test_rewriting_same_object_invalidates(self):
        data = ObservableDict({"x": "one|many"})
        calls = []

        def getter():
            calls.append(1)
            return data.get("x")

        computed = Computed(getter, data)
        notified = []
        computed.subscribe(lambda c: notified.append(1))
        assert computed.value == "one|many"

        data["x"] = data["x"]
        assert notified == [1]
        assert computed.value == "one|many"
        assert len(calls) == 2

    def test_unreferenced_computed_is_released(self):
        data = ObservableDict({"a": "1"})
        computed = Computed(lambda: data.get("a"), data)
        assert data.subscriber_count == 1

        del computed
        gc.collect()
        data["a"] = "2"
        assert data.subscriber_count == 0

    def test_dispose_detaches(self):
        data = ObservableDict({"a": "1"})
        computed = Computed(lambda: data.get("a"), data)
        assert computed.value == "1"
        computed.dispose()

        data["a"] = "2"
        assert computed.value == "1"
