"""
Tree Registry

Ledger of published Merkle roots with ownership, fee and lifecycle rules.

Per-root state machine:
    Unregistered -> Active -> Inactive
    Inactive -> Active only through a fresh register() call

Rules:
- Only the creator of an entry may update its description or remove it
- A caller's first successful registration is free; later ones pay the
  platform fee. The free registration is consumed once and never re-armed
- remove() is a soft delete: the record stays, only is_active changes
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from core.config.runtime import RuntimeConfig
from core.crypto.addresses import normalize_address
from core.crypto.hashing import HASH_SIZE, coerce_hash, to_hex
from core.registry.fee_sink import FeeSink, NullFeeSink, TreasuryFeeSink
from core.registry.file_store import JsonFileRegistryStore
from core.registry.store import InMemoryRegistryStore, RegistryStore
from core.schemas.errors import (
    AlreadyActiveException,
    InactiveException,
    InsufficientFeeException,
    InvalidInputException,
    NotFoundException,
    UnauthorizedException,
)
from core.schemas.registry import RegistryEntry


logger = logging.getLogger(__name__)

ZERO_ROOT = to_hex(b"\x00" * HASH_SIZE)


def _unix_now() -> int:
    return int(time.time())


def _require_int(value: object, field: str, minimum: int) -> int:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputException(
            f"{field} must be an integer, got {type(value).__name__}",
            field=field,
        )
    if value < minimum:
        raise InvalidInputException(
            f"{field} must be >= {minimum}, got {value}",
            field=field,
        )
    return value


class TreeRegistry:
    """
    Registry of Merkle roots.

    Usage:
        registry = TreeRegistry(InMemoryRegistryStore(platform_fee=10**15))
        registry.register(root, "allowlist", 3, caller=alice, fee_paid=0)
        registry.is_registered(root)  # True
        registry.remove(root, caller=alice)
    """

    def __init__(
        self,
        store: RegistryStore | None = None,
        fee_sink: FeeSink | None = None,
        owner: str | None = None,
        allow_reregistration_by_other: bool = True,
        clock: Callable[[], int] | None = None,
    ) -> None:
        self._store = store if store is not None else InMemoryRegistryStore()
        self._fee_sink = fee_sink if fee_sink is not None else NullFeeSink()
        self._owner = normalize_address(owner) if owner else None
        self._allow_reregistration_by_other = allow_reregistration_by_other
        self._clock = clock or _unix_now

    @classmethod
    def from_config(
        cls,
        config: RuntimeConfig,
        store: RegistryStore | None = None,
        clock: Callable[[], int] | None = None,
    ) -> "TreeRegistry":
        """
        Build a registry from runtime configuration.

        Uses a JSON file store when ``registry.store_path`` is set, else an
        in-memory store, and a treasury sink when a treasury is configured.
        """
        reg = config.registry
        if store is None:
            if reg.store_path:
                store = JsonFileRegistryStore(reg.store_path, platform_fee=reg.platform_fee)
            else:
                store = InMemoryRegistryStore(platform_fee=reg.platform_fee)

        fee_sink: FeeSink = (
            TreasuryFeeSink(reg.treasury_address) if reg.treasury_address else NullFeeSink()
        )
        return cls(
            store=store,
            fee_sink=fee_sink,
            owner=reg.owner_address,
            allow_reregistration_by_other=reg.allow_reregistration_by_other,
            clock=clock,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def store(self) -> RegistryStore:
        return self._store

    @property
    def owner(self) -> Optional[str]:
        return self._owner

    @property
    def treasury(self) -> Optional[str]:
        """Treasury address, if the fee sink forwards to one."""
        return getattr(self._fee_sink, "treasury", None)

    def is_registered(self, root: bytes | str) -> bool:
        """True iff an entry exists for ``root`` and is active."""
        entry = self._store.get_entry(self._root_key(root))
        return entry is not None and entry.is_active

    def get_entry(self, root: bytes | str) -> RegistryEntry:
        """
        Return the record for ``root``, including removed entries.

        Raises:
            NotFoundException: If the root was never registered
        """
        key = self._root_key(root)
        entry = self._store.get_entry(key)
        if entry is None:
            raise NotFoundException(f"No registry entry for root {key}", key=key)
        return entry

    def platform_fee(self) -> int:
        return self._store.get_platform_fee()

    def is_newcomer(self, address: str) -> bool:
        """True if ``address`` still has its free registration."""
        return not self._store.has_used_free_tree(normalize_address(address))

    def required_fee(self, caller: str) -> int:
        """Fee ``caller`` would have to pay to register right now."""
        return 0 if self.is_newcomer(caller) else self.platform_fee()

    # =========================================================================
    # Mutations
    # =========================================================================

    def register(
        self,
        root: bytes | str,
        description: str,
        list_size: int,
        caller: str,
        fee_paid: int = 0,
    ) -> str:
        """
        Publish a root.

        Args:
            root: 32-byte Merkle root (bytes or 0x-hex), not all zeros
            description: Free-text label
            list_size: Declared number of committed addresses (>= 1)
            caller: Registering address; becomes the creator
            fee_paid: Value sent with the registration (wei)

        Returns:
            The root as 0x-hex, which identifies the entry

        Raises:
            InvalidInputException: On malformed arguments
            AlreadyActiveException: If the root already has an active entry
            UnauthorizedException: If re-registering another creator's
                removed root while that is disallowed
            InsufficientFeeException: If fee_paid is below the required fee
        """
        key = self._root_key(root)
        if key == ZERO_ROOT:
            raise InvalidInputException("The zero root cannot be registered", field="root")
        if not isinstance(description, str):
            raise InvalidInputException("description must be a string", field="description")
        _require_int(list_size, "list_size", 1)
        _require_int(fee_paid, "fee_paid", 0)
        creator = normalize_address(caller)

        with self._store.atomic():
            current = self._store.get_entry(key)
            if current is not None and current.is_active:
                logger.warning(f"Rejected registration of {key}: already active")
                raise AlreadyActiveException(f"Root {key} is already registered", root=key)

            if (
                current is not None
                and current.creator != creator
                and not self._allow_reregistration_by_other
            ):
                logger.warning(
                    f"Rejected re-registration of {key} by {creator}: "
                    f"previous creator is {current.creator}"
                )
                raise UnauthorizedException(
                    f"Only {current.creator} may re-register root {key}",
                    caller=creator,
                )

            required = self._store.get_platform_fee() if self._store.has_used_free_tree(creator) else 0
            if fee_paid < required:
                logger.warning(
                    f"Rejected registration of {key} by {creator}: "
                    f"paid {fee_paid}, required {required}"
                )
                raise InsufficientFeeException(
                    f"Registration requires a fee of {required} wei, got {fee_paid}",
                    required=required,
                    paid=fee_paid,
                )

            entry = RegistryEntry(
                root=key,
                description=description,
                creator=creator,
                list_size=list_size,
                timestamp=self._clock(),
                is_active=True,
            )
            if not self._store.compare_and_swap_entry(key, current, entry):
                raise AlreadyActiveException(
                    f"Root {key} was registered concurrently", root=key
                )

            self._store.mark_used_free_tree(creator)

            if fee_paid > 0:
                self._fee_sink.collect(creator, fee_paid, key)

        logger.info(f"Registered root {key} by {creator} (list_size={list_size}, fee={fee_paid})")
        return key

    def update_description(
        self,
        root: bytes | str,
        new_description: str,
        caller: str,
    ) -> RegistryEntry:
        """
        Change the description of an active entry.

        Raises:
            NotFoundException: If the root was never registered
            UnauthorizedException: If caller is not the creator
            InactiveException: If the entry has been removed
        """
        key = self._root_key(root)
        if not isinstance(new_description, str):
            raise InvalidInputException("description must be a string", field="description")
        who = normalize_address(caller)

        with self._store.atomic():
            current = self._owned_entry(key, who)
            if not current.is_active:
                raise InactiveException(f"Root {key} has been removed", root=key)

            updated = current.model_copy(update={"description": new_description})
            self._store.put_entry(updated)

        logger.info(f"Updated description of root {key}")
        return updated

    def remove(self, root: bytes | str, caller: str) -> RegistryEntry:
        """
        Soft-delete an entry: mark it inactive, keep every other field.

        Raises:
            NotFoundException: If the root was never registered
            UnauthorizedException: If caller is not the creator
            InactiveException: If the entry is already removed
        """
        key = self._root_key(root)
        who = normalize_address(caller)

        with self._store.atomic():
            current = self._owned_entry(key, who)
            if not current.is_active:
                raise InactiveException(f"Root {key} is already removed", root=key)

            removed = current.model_copy(update={"is_active": False})
            self._store.put_entry(removed)

        logger.info(f"Removed root {key}")
        return removed

    def set_platform_fee(self, new_fee: int, caller: str) -> None:
        """
        Change the platform fee. Existing entries are unaffected.

        Raises:
            UnauthorizedException: If caller is not the registry owner
            InvalidInputException: If new_fee is negative
        """
        _require_int(new_fee, "platform_fee", 0)
        who = normalize_address(caller)
        if self._owner is None or who != self._owner:
            logger.warning(f"Rejected platform fee change by {who}")
            raise UnauthorizedException(
                "Only the registry owner may change the platform fee",
                caller=who,
            )

        with self._store.atomic():
            old_fee = self._store.get_platform_fee()
            self._store.set_platform_fee(new_fee)

        logger.info(f"Platform fee changed from {old_fee} to {new_fee} wei")

    # =========================================================================
    # Helpers
    # =========================================================================

    @staticmethod
    def _root_key(root: bytes | str) -> str:
        return to_hex(coerce_hash(root, field="root")).lower()

    def _owned_entry(self, key: str, who: str) -> RegistryEntry:
        current = self._store.get_entry(key)
        if current is None:
            raise NotFoundException(f"No registry entry for root {key}", key=key)
        if current.creator != who:
            logger.warning(f"Rejected change to root {key} by non-creator {who}")
            raise UnauthorizedException(
                f"Only the creator {current.creator} may modify root {key}",
                caller=who,
            )
        return current


__all__ = [
    "ZERO_ROOT",
    "TreeRegistry",
]
