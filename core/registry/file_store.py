"""
JSON File Registry Store

Persists registry state to a single JSON file so the CLI can operate on
one registry across invocations.

File layout:
    {
      "entries": {"0x<root>": {RegistryEntry fields}},
      "used_free": ["0x<address>", ...],
      "platform_fee": 1000000000000000
    }

Each outermost ``atomic()`` block holds an exclusive lock on a sidecar
``<file>.lock``, re-reads the file on entry and writes it once on clean
exit, so separate processes sharing one file see each other's changes.
All writes are atomic (temp file + os.replace) for crash safety.
"""

from __future__ import annotations

import fcntl
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import IO, Any, Optional

from pydantic import ValidationError

from core.registry.store import InMemoryRegistryStore
from core.schemas.errors import RegistryStoreException
from core.schemas.registry import RegistryEntry


logger = logging.getLogger(__name__)


class JsonFileRegistryStore(InMemoryRegistryStore):
    """
    File-backed registry store.

    ``platform_fee`` only seeds a new file; an existing file keeps its own
    fee.
    """

    def __init__(self, path: str | Path, platform_fee: int = 0) -> None:
        super().__init__(platform_fee=platform_fee)
        self.path = Path(path)
        self.lock_path = self.path.with_name(self.path.name + ".lock")
        self._lock_file: Optional[IO[str]] = None
        self._seed_fee = platform_fee
        # Fail fast on a corrupt file
        with self.atomic():
            pass

    # =========================================================================
    # Persistence hooks
    # =========================================================================

    def _begin(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        try:
            lock_file = open(self.lock_path, "a", encoding="utf-8")
        except OSError as e:
            raise RegistryStoreException(
                f"Cannot open lock file {self.lock_path}: {e}",
                details={"path": str(self.path)},
            ) from e
        try:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        except OSError as e:
            lock_file.close()
            raise RegistryStoreException(
                f"Cannot lock registry file {self.path}: {e}",
                details={"path": str(self.path)},
            ) from e
        self._lock_file = lock_file

        try:
            self._load()
        except BaseException:
            self._end()
            raise

    def _end(self) -> None:
        lock_file, self._lock_file = self._lock_file, None
        if lock_file is not None:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
            lock_file.close()

    def _commit(self) -> None:
        self._write()

    # =========================================================================
    # File I/O
    # =========================================================================

    def _load(self) -> None:
        if not self.path.is_file():
            self._entries = {}
            self._used_free = set()
            self._platform_fee = self._seed_fee
            return

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            raise RegistryStoreException(
                f"Cannot read registry file {self.path}: {e}",
                details={"path": str(self.path)},
            ) from e

        if not isinstance(data, dict):
            raise RegistryStoreException(
                f"Registry file {self.path} does not hold a JSON object",
                details={"path": str(self.path)},
            )

        try:
            entries = {
                root: RegistryEntry.model_validate(raw)
                for root, raw in data.get("entries", {}).items()
            }
        except ValidationError as e:
            raise RegistryStoreException(
                f"Registry file {self.path} holds an invalid entry: {e}",
                details={"path": str(self.path)},
            ) from e

        self._entries = entries
        self._used_free = set(data.get("used_free", []))
        self._platform_fee = int(data.get("platform_fee", self._seed_fee))
        logger.debug(f"Loaded {len(entries)} registry entries from {self.path}")

    def _snapshot(self) -> dict[str, Any]:
        return {
            "entries": {
                root: entry.model_dump()
                for root, entry in sorted(self._entries.items())
            },
            "used_free": sorted(self._used_free),
            "platform_fee": self._platform_fee,
        }

    def _write(self) -> None:
        """Atomically write the JSON file (temp + rename)."""
        data = json.dumps(self._snapshot(), indent=2, sort_keys=True)

        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), suffix=".tmp", prefix=".registry_"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, str(self.path))
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise RegistryStoreException(
                f"Cannot write registry file {self.path}: {e}",
                details={"path": str(self.path)},
            ) from e

        logger.debug(f"Saved registry state to {self.path}")


__all__ = ["JsonFileRegistryStore"]
