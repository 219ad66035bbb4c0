"""Ordered registry of descriptive records gathered at import time."""

from __future__ import annotations

from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


class MetaRegistry(Generic[T]):
    """Keeps registered records in registration order.

    ``register`` returns its argument, so it can be used as a decorator.
    """

    def __init__(self):
        self._items: list[T] = []

    def register(self, info):
        self._items.append(info)
        return info

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self):
        return len(self._items)