"""Observable state primitives shared by the ledger and the pet registry."""

from .property import (
    ComputedProperty,
    ReactiveProperty,
    ReadOnlyReactiveProperty,
    Subscription,
    computed,
)

__all__ = [
    "ComputedProperty",
    "ReactiveProperty",
    "ReadOnlyReactiveProperty",
    "Subscription",
    "computed",
]
