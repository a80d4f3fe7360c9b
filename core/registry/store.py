"""
Registry Store

Storage abstraction for registry state. The registry logic talks only to
RegistryStore, so the same rules run against an in-memory store in tests,
a JSON file for the CLI, or a ledger adapter in production.

State held by a store:
- root (0x-hex) -> RegistryEntry
- set of addresses that have used their free registration
- the platform fee scalar
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, Optional

from core.schemas.registry import RegistryEntry


class RegistryStore(ABC):
    """
    Abstract registry state store.

    Implementations must make ``atomic()`` serialize every block run inside
    it against all other ``atomic()`` blocks, including those of other
    store instances over the same backing state. A block either applies
    all of its changes or, if it raises, none of them.
    """

    @abstractmethod
    def get_entry(self, root: str) -> Optional[RegistryEntry]:
        """Return the entry for ``root`` (active or not), or None."""

    @abstractmethod
    def put_entry(self, entry: RegistryEntry) -> None:
        """Insert or replace the entry keyed by ``entry.root``."""

    @abstractmethod
    def compare_and_swap_entry(
        self,
        root: str,
        expected: Optional[RegistryEntry],
        new: RegistryEntry,
    ) -> bool:
        """
        Replace the entry for ``root`` with ``new`` only if the current
        entry equals ``expected`` (None meaning "absent").

        Returns:
            True if the swap happened
        """

    @abstractmethod
    def has_used_free_tree(self, address: str) -> bool:
        """Whether ``address`` has already consumed its free registration."""

    @abstractmethod
    def mark_used_free_tree(self, address: str) -> None:
        """Record that ``address`` has consumed its free registration."""

    @abstractmethod
    def get_platform_fee(self) -> int:
        """Current platform fee (wei)."""

    @abstractmethod
    def set_platform_fee(self, fee: int) -> None:
        """Set the platform fee (wei)."""

    @abstractmethod
    @contextmanager
    def atomic(self) -> Iterator[None]:
        """Run the enclosed block as one serialized, all-or-nothing unit."""


class InMemoryRegistryStore(RegistryStore):
    """
    Dict-backed store guarded by a re-entrant lock.

    ``atomic()`` is transactional: state is snapshotted when the outermost
    block is entered and restored if the block raises. Subclasses persist
    through the ``_begin`` / ``_commit`` / ``_end`` hooks, and ``_commit``
    only runs once the outermost block has finished cleanly.

    Usage:
        store = InMemoryRegistryStore(platform_fee=10**15)
        with store.atomic():
            store.put_entry(entry)
    """

    def __init__(self, platform_fee: int = 0) -> None:
        self._lock = threading.RLock()
        self._entries: dict[str, RegistryEntry] = {}
        self._used_free: set[str] = set()
        self._platform_fee = platform_fee
        self._depth = 0
        self._dirty = False

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                return

            self._begin()
            try:
                snapshot = (dict(self._entries), set(self._used_free), self._platform_fee)
                self._depth = 1
                self._dirty = False
                try:
                    yield
                    if self._dirty:
                        self._commit()
                except BaseException:
                    self._entries, self._used_free, self._platform_fee = snapshot
                    raise
                finally:
                    self._depth = 0
                    self._dirty = False
            finally:
                self._end()

    def get_entry(self, root: str) -> Optional[RegistryEntry]:
        with self.atomic():
            return self._entries.get(root)

    def put_entry(self, entry: RegistryEntry) -> None:
        with self.atomic():
            self._entries[entry.root] = entry
            self._dirty = True

    def compare_and_swap_entry(
        self,
        root: str,
        expected: Optional[RegistryEntry],
        new: RegistryEntry,
    ) -> bool:
        with self.atomic():
            if self._entries.get(root) != expected:
                return False
            self._entries[root] = new
            self._dirty = True
            return True

    def has_used_free_tree(self, address: str) -> bool:
        with self.atomic():
            return address in self._used_free

    def mark_used_free_tree(self, address: str) -> None:
        with self.atomic():
            if address not in self._used_free:
                self._used_free.add(address)
                self._dirty = True

    def get_platform_fee(self) -> int:
        with self.atomic():
            return self._platform_fee

    def set_platform_fee(self, fee: int) -> None:
        with self.atomic():
            self._platform_fee = fee
            self._dirty = True

    def list_entries(self) -> list[RegistryEntry]:
        """All entries, active and inactive, ordered by root."""
        with self.atomic():
            return [self._entries[root] for root in sorted(self._entries)]

    # Persistence hooks, all called under the lock

    def _begin(self) -> None:
        """Outermost atomic block is starting."""

    def _commit(self) -> None:
        """Outermost atomic block changed state and finished cleanly."""

    def _end(self) -> None:
        """Outermost atomic block is over, committed or not."""


__all__ = [
    "RegistryStore",
    "InMemoryRegistryStore",
]
