"""Mutable key/value stores for headers, query parameters, and transport config."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any, Optional


class ArrayStore:
    """A small mutable mapping with fluent setters.

    Connectors, requests, and pending requests each own their own stores.
    Writing a key always overwrites the previous value, so applying the
    same authenticator or header twice leaves a single entry.

    Args:
        data: Optional initial contents.  The mapping is copied.
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    def all(self) -> dict[str, Any]:
        """Return a shallow copy of every entry."""
        return dict(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def add(self, key: str, value: Any) -> ArrayStore:
        """Set *key* to *value*, replacing any existing entry."""
        self._data[key] = value
        return self

    def merge(self, *others: Mapping[str, Any]) -> ArrayStore:
        """Overlay each mapping in *others* onto the store, left to right."""
        for other in others:
            self._data.update(other)
        return self

    def set(self, data: Mapping[str, Any]) -> ArrayStore:
        """Replace the entire contents of the store."""
        self._data = dict(data)
        return self

    def remove(self, key: str) -> ArrayStore:
        self._data.pop(key, None)
        return self

    def is_empty(self) -> bool:
        return not self._data

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"
