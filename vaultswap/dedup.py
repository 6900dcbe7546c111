"""Removal of keys whose values duplicate an earlier key within one secret."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol

from vaultswap.diff import _format_value


class KVClient(Protocol):
    """KV v2 access on a fixed mount: ``get`` returns the secret data or None."""

    def get(self, path: str) -> Mapping[str, Any] | None: ...

    def put(self, path: str, data: Mapping[str, Any]) -> Any: ...


def _wrap(prefix: str, exc: Exception) -> RuntimeError:
    err = RuntimeError(f"{prefix}: {exc}")
    err.__cause__ = exc
    return err


@dataclass
class Result:
    """Outcome of a deduplication check for a single path."""

    path: str
    duplicates: list[str] = field(default_factory=list)
    removed: int = 0
    skipped: bool = False
    dry_run: bool = False
    error: Exception | None = None


class Deduper:
    """Keeps the first key for each distinct value and drops the rest."""

    def __init__(self, client: KVClient, dry_run: bool = False) -> None:
        self._client = client
        self._dry_run = dry_run

    def deduplicate_path(self, path: str) -> Result:
        """Remove keys at ``path`` whose value repeats an earlier key's value."""
        try:
            data = self._client.get(path)
        except Exception as exc:
            return Result(path=path, error=_wrap("read", exc))
        if data is None:
            return Result(path=path, skipped=True)

        seen: set[str] = set()
        duplicates: list[str] = []
        clean: dict[str, Any] = {}
        for key, value in data.items():
            text = _format_value(value)
            if text in seen:
                duplicates.append(key)
            else:
                seen.add(text)
                clean[key] = value

        if not duplicates:
            return Result(path=path, skipped=True, dry_run=self._dry_run)

        if not self._dry_run:
            try:
                self._client.put(path, clean)
            except Exception as exc:
                return Result(path=path, error=_wrap("write", exc))

        return Result(
            path=path,
            duplicates=duplicates,
            removed=len(duplicates),
            dry_run=self._dry_run,
        )

    def deduplicate_paths(self, paths: Iterable[str]) -> list[Result]:
        """Deduplicate each path in turn and return every result."""
        return [self.deduplicate_path(path) for path in paths]