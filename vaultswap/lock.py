"""Advisory locks stored as Vault secrets."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping, Protocol


class LockClient(Protocol):
    """The Vault operations the locker needs; ``read_secret`` raises when absent."""

    def read_secret(self, path: str) -> Mapping[str, Any] | None: ...

    def write_secret(self, path: str, data: Mapping[str, Any]) -> None: ...

    def delete_secret(self, path: str) -> None: ...


class Action(str, Enum):
    """What a lock or unlock call did."""

    LOCKED = "locked"
    UNLOCKED = "unlocked"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class Result:
    """Outcome of a lock or unlock on one path."""

    path: str
    action: Action
    dry_run: bool = False
    error: Exception | None = None


def _wrap(prefix: str, exc: Exception) -> RuntimeError:
    err = RuntimeError(f"{prefix}: {exc}")
    err.__cause__ = exc
    return err


class Locker:
    """Takes and releases an advisory lock kept at a fixed KV path."""

    def __init__(self, client: LockClient, lock_path: str, dry_run: bool = False) -> None:
        self._client = client
        self.lock_path = lock_path
        self._dry_run = dry_run

    def _existing(self) -> Mapping[str, Any] | None:
        try:
            return self._client.read_secret(self.lock_path)
        except Exception:
            return None

    def lock(self, owner: str) -> Result:
        """Write a lock record for ``owner``; skipped when a lock already exists."""
        if self._existing() is not None:
            return Result(self.lock_path, Action.SKIPPED, dry_run=self._dry_run)
        if self._dry_run:
            return Result(self.lock_path, Action.LOCKED, dry_run=True)

        payload = {
            "owner": owner,
            "locked_at": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
        }
        try:
            self._client.write_secret(self.lock_path, payload)
        except Exception as exc:
            return Result(self.lock_path, Action.ERROR, error=_wrap("lock write failed", exc))
        return Result(self.lock_path, Action.LOCKED)

    def unlock(self) -> Result:
        """Remove the lock record; skipped when there is none."""
        if self._existing() is None:
            return Result(self.lock_path, Action.SKIPPED, dry_run=self._dry_run)
        if self._dry_run:
            return Result(self.lock_path, Action.UNLOCKED, dry_run=True)

        try:
            self._client.delete_secret(self.lock_path)
        except Exception as exc:
            return Result(self.lock_path, Action.ERROR, error=_wrap("lock delete failed", exc))
        return Result(self.lock_path, Action.UNLOCKED)