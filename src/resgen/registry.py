"""Insertion-ordered plugin registry.

Registries are filled once at start-up (module import or CLI setup) and
only read while rendering; they carry no locking.
"""

from __future__ import annotations

import logging
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar

log = logging.getLogger("resgen.registry")

T = TypeVar("T")

__all__ = ["Registry", "UnknownEntryError"]


class UnknownEntryError(KeyError):
    def __init__(self, kind: str, key: str) -> None:
        super().__init__(key)
        self.kind = kind
        self.key = key

    def __str__(self) -> str:
        return f"Unknown {self.kind} '{self.key}'"


class Registry(Generic[T]):
    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._entries: Dict[str, T] = {}

    def register(self, key: str, value: T) -> None:
        """Add ``value`` under ``key``, replacing any earlier entry."""
        if key in self._entries:
            log.debug("Overriding %s '%s'", self.kind, key)
            # Overrides move to the end so listings reflect registration order.
            del self._entries[key]
        else:
            log.debug("Registered %s '%s'", self.kind, key)
        self._entries[key] = value

    def find(self, key: str) -> T:
        try:
            return self._entries[key]
        except KeyError:
            raise UnknownEntryError(self.kind, key) from None

    def get(self, key: str) -> Optional[T]:
        return self._entries.get(key)

    def entries(self) -> List[Tuple[str, T]]:
        return list(self._entries.items())

    def keys(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
