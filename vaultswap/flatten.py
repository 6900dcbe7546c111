"""Collapsing of nested secret values into dot-separated top-level keys."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol

from vaultswap.diff import _format_value


class SecretClient(Protocol):
    """A client that can read and write secrets by path."""

    def read_secret(self, path: str) -> Mapping[str, Any]: ...

    def write_secret(self, path: str, data: Mapping[str, Any]) -> None: ...


def _wrap(prefix: str, exc: Exception) -> RuntimeError:
    err = RuntimeError(f"{prefix}: {exc}")
    err.__cause__ = exc
    return err


def flatten_map(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``data`` with nested mappings expanded into ``outer.inner`` keys."""
    flat: dict[str, Any] = {}

    def walk(prefix: str, src: Mapping[str, Any]) -> None:
        for key, value in src.items():
            full = f"{prefix}.{key}" if prefix else key
            if isinstance(value, Mapping):
                walk(full, value)
            else:
                flat[full] = value

    walk("", data)
    return flat


def _maps_equal(a: Mapping[str, Any], b: Mapping[str, Any]) -> bool:
    if len(a) != len(b):
        return False
    return all(
        key in b and _format_value(value) == _format_value(b[key])
        for key, value in a.items()
    )


@dataclass
class Result:
    """Outcome of flattening a single path."""

    path: str
    keys: list[str] = field(default_factory=list)
    skipped: bool = False
    dry_run: bool = False
    error: Exception | None = None


class Flattener:
    """Rewrites secrets so that no value is itself a mapping."""

    def __init__(self, client: SecretClient, dry_run: bool = False) -> None:
        self._client = client
        self._dry_run = dry_run

    def flatten_path(self, path: str) -> Result:
        """Flatten the secret at ``path`` and write it back unless dry-running."""
        try:
            data = self._client.read_secret(path)
        except Exception as exc:
            return Result(path=path, error=_wrap("read", exc))

        data = data or {}
        flat = flatten_map(data)
        if _maps_equal(data, flat):
            return Result(path=path, skipped=True)

        keys = list(flat)
        if self._dry_run:
            return Result(path=path, keys=keys, dry_run=True)

        try:
            self._client.write_secret(path, flat)
        except Exception as exc:
            return Result(path=path, error=_wrap("write", exc))
        return Result(path=path, keys=keys)

    def flatten_paths(self, paths: Iterable[str]) -> list[Result]:
        """Flatten each path in turn and return every result."""
        return [self.flatten_path(path) for path in paths]