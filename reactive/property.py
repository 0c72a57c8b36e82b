"""Synchronous observable values.

A ``ReactiveProperty`` holds one value and pushes every change to its
subscribers on the caller's thread, inside ``set``. Subscribing replays the
current value once, so late subscribers never start out stale.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Callback = Callable[[Any], None]


class Subscription:
    """Handle returned by ``subscribe``; dispose it to stop receiving values."""

    def __init__(self, owner: ReactiveProperty[Any] | None, callback: Callback):
        self._owner = owner
        self._callback = callback

    @property
    def disposed(self) -> bool:
        return self._owner is None

    def dispose(self) -> None:
        owner, self._owner = self._owner, None
        if owner is not None:
            owner._remove(self)


class ReactiveProperty(Generic[T]):
    """Observable value with replay-one subscription semantics.

    With ``distinct=True`` (the default) ``set`` only notifies when the new
    value differs from the old one. ``distinct=False`` notifies on every
    assignment, which suits container values that are reassigned wholesale.
    """

    def __init__(self, value: T, *, distinct: bool = True, name: str = ""):
        self._value = value
        self._distinct = distinct
        self._name = name or type(self).__name__
        self._subscriptions: list[Subscription] = []
        self._disposed = False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._name}={self._value!r}>"

    @property
    def value(self) -> T:
        return self._value

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        old = self._value
        self._value = value
        if self._distinct and value == old:
            return
        self._notify(value)

    def subscribe(self, callback: Callback) -> Subscription:
        if self._disposed:
            # Nothing will ever be published again; hand back a dead handle.
            callback(self._value)
            return Subscription(None, callback)
        sub = Subscription(self, callback)
        self._subscriptions.append(sub)
        callback(self._value)
        return sub

    def read_only(self) -> ReadOnlyReactiveProperty[T]:
        return ReadOnlyReactiveProperty(self)

    def dispose(self) -> None:
        """Drop all subscribers. Outstanding handles stay safe to dispose."""
        if self._disposed:
            return
        self._disposed = True
        subs, self._subscriptions = self._subscriptions, []
        for sub in subs:
            sub._owner = None
        logger.debug("Disposed %s (%d subscriber(s) dropped)", self._name, len(subs))

    def _notify(self, value: T) -> None:
        # Snapshot so callbacks may subscribe/dispose while being notified.
        for sub in list(self._subscriptions):
            if sub._owner is self:
                sub._callback(value)

    def _remove(self, sub: Subscription) -> None:
        try:
            self._subscriptions.remove(sub)
        except ValueError:
            pass


class ReadOnlyReactiveProperty(Generic[T]):
    """View over a ``ReactiveProperty`` without ``set``."""

    def __init__(self, source: ReactiveProperty[T]):
        self._source = source

    def __repr__(self) -> str:
        return f"<ReadOnly {self._source!r}>"

    @property
    def value(self) -> T:
        return self._source.value

    def get(self) -> T:
        return self._source.get()

    def subscribe(self, callback: Callback) -> Subscription:
        return self._source.subscribe(callback)


class ComputedProperty(ReadOnlyReactiveProperty[T]):
    """Read-only value derived from the latest values of several sources."""

    def __init__(self, fn: Callable[..., T], sources: tuple[Any, ...], name: str = ""):
        self._fn = fn
        self._sources = sources
        self._ready = False
        super().__init__(ReactiveProperty(self._compute(), name=name or getattr(fn, "__name__", "")))
        # Replay-one on each source fires immediately; ignore it until wired.
        self._upstream = [src.subscribe(self._on_source) for src in sources]
        self._ready = True

    def _compute(self) -> T:
        return self._fn(*(src.get() for src in self._sources))

    def _on_source(self, _value: Any) -> None:
        if self._ready:
            self._source.set(self._compute())

    def dispose(self) -> None:
        for sub in self._upstream:
            sub.dispose()
        self._upstream = []
        self._source.dispose()


def computed(fn: Callable[..., T], *sources: Any, name: str = "") -> ComputedProperty[T]:
    """Combine the latest values of ``sources`` through ``fn``."""
    return ComputedProperty(fn, sources, name=name)
