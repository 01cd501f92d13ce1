"""
Observable mapping and computed values — the reactive surface of the store.

ObservableDict publishes every write to its subscribers as (key, old, new).
Keys are never deleted: removal is expressed by writing None (a tombstone),
so a subscriber bound before a key existed, or after it disappeared, still
sees the change as a plain value update.

Computed wraps a getter over an ObservableDict. Its value is cached until the
source is written to, even with an identical value, at which point it is
invalidated and its own subscribers are notified. The source only holds a
weak reference to a Computed, so values nobody references any more are
garbage collected together with their subscription.
"""

import weakref
from collections.abc import Iterator, MutableMapping
from typing import Any, Callable, Generic, TypeVar

__all__ = ["ObservableDict", "Computed", "ChangeCallback"]

T = TypeVar("T")

ChangeCallback = Callable[[str, Any, Any], None]


class ObservableDict(MutableMapping[str, Any]):
    """Mapping that notifies subscribers on every write.

    Usage:
        messages = ObservableDict()
        unsubscribe = messages.subscribe(lambda key, old, new: ...)
        messages["greeting"] = "Hello"   # -> callback("greeting", None, "Hello")
        unsubscribe()
    """

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})
        self._subscribers: list[Callable[[], ChangeCallback | None]] = []

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        old = self._data.get(key)
        self._data[key] = value
        self._publish(key, old, value)

    def __delitem__(self, key: str) -> None:
        raise TypeError(
            "ObservableDict keys cannot be deleted; assign None to tombstone them"
        )

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"<ObservableDict({self._data!r})>"

    def subscribe(self, callback: ChangeCallback, weak: bool = False) -> Callable[[], None]:
        """Register a change listener.

        Args:
            callback: Called with (key, old_value, new_value) after each write.
            weak: If True and callback is a bound method, hold it weakly so the
                subscription ends when its owner is collected.

        Returns:
            A function that removes the subscription.
        """
        if weak and hasattr(callback, "__self__"):
            ref: Callable[[], ChangeCallback | None] = weakref.WeakMethod(callback)  # type: ignore[arg-type]
        else:
            ref = lambda: callback  # noqa: E731

        self._subscribers.append(ref)

        def unsubscribe() -> None:
            if ref in self._subscribers:
                self._subscribers.remove(ref)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        """Number of live subscriptions."""
        return sum(1 for ref in self._subscribers if ref() is not None)

    def _publish(self, key: str, old: Any, new: Any) -> None:
        dead = []
        for ref in list(self._subscribers):
            callback = ref()
            if callback is None:
                dead.append(ref)
                continue
            callback(key, old, new)
        for ref in dead:
            if ref in self._subscribers:
                self._subscribers.remove(ref)


class Computed(Generic[T]):
    """Lazily cached value derived from an ObservableDict.

    Usage:
        greeting = Computed(lambda: messages.get("greeting"), messages)
        greeting.value                # computes and caches
        messages["greeting"] = "Hi"   # invalidates and notifies
        greeting.value                # recomputes -> "Hi"
    """

    def __init__(self, getter: Callable[[], T], source: ObservableDict) -> None:
        self._getter = getter
        self._dirty = True
        self._value: T | None = None
        self._subscribers: list[Callable[["Computed[T]"], None]] = []
        self._unsubscribe = source.subscribe(self._invalidate, weak=True)

    @property
    def value(self) -> T:
        if self._dirty:
            self._value = self._getter()
            self._dirty = False
        return self._value  # type: ignore[return-value]

    def subscribe(self, callback: Callable[["Computed[T]"], None]) -> Callable[[], None]:
        """Register a listener called with this Computed when it is invalidated."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def dispose(self) -> None:
        """Detach from the source; the value stops updating."""
        self._unsubscribe()
        self._subscribers.clear()

    def _invalidate(self, key: str, old: Any, new: Any) -> None:
        # Every write counts: the getter may depend on state beyond the value
        self._dirty = True
        for callback in list(self._subscribers):
            callback(self)

    def __repr__(self) -> str:
        state = "dirty" if self._dirty else repr(self._value)
        return f"<Computed({state})>"
