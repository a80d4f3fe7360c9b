"""
Fee Sinks

Where registration fees go. The registry only decides how much is owed;
moving the value is the sink's job, so registry logic stays independent of
any payment rail.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Protocol

from core.crypto.addresses import normalize_address


logger = logging.getLogger(__name__)


class FeeSink(Protocol):
    """Receives fees paid on successful registrations."""

    def collect(self, payer: str, amount: int, root: str) -> None:
        ...


class NullFeeSink:
    """Accepts and discards fees."""

    def collect(self, payer: str, amount: int, root: str) -> None:
        return None


@dataclass(frozen=True)
class FeeTransfer:
    """One fee forwarded to the treasury."""
    payer: str
    amount: int
    root: str
    treasury: str


class TreasuryFeeSink:
    """
    Forwards every fee to a treasury address.

    Transfers are recorded in memory; a ledger-backed deployment replaces
    this with a sink that submits the value transfer.
    """

    def __init__(self, treasury: str) -> None:
        self.treasury = normalize_address(treasury)
        self._lock = threading.Lock()
        self._transfers: list[FeeTransfer] = []

    def collect(self, payer: str, amount: int, root: str) -> None:
        transfer = FeeTransfer(payer=payer, amount=amount, root=root, treasury=self.treasury)
        with self._lock:
            self._transfers.append(transfer)
        logger.info(f"Forwarded fee of {amount} wei from {payer} to treasury {self.treasury}")

    @property
    def transfers(self) -> list[FeeTransfer]:
        with self._lock:
            return list(self._transfers)

    @property
    def total_collected(self) -> int:
        with self._lock:
            return sum(t.amount for t in self._transfers)


__all__ = [
    "FeeSink",
    "NullFeeSink",
    "FeeTransfer",
    "TreasuryFeeSink",
]
