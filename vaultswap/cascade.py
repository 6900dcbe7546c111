"""Propagation of one source secret to several destination paths."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol


class LogicalClient(Protocol):
    """Raw Vault logical access: ``read`` returns the secret's data or None."""

    def read(self, path: str) -> Mapping[str, Any] | None: ...

    def write(self, path: str, data: Mapping[str, Any]) -> Any: ...


def _kv_v2_data_path(path: str) -> str:
    return "secret/data/" + path


def _wrap(prefix: str, exc: Exception) -> RuntimeError:
    err = RuntimeError(f"{prefix}: {exc}")
    err.__cause__ = exc
    return err


@dataclass
class Result:
    """Outcome of cascading a secret to a single destination path."""

    source: str
    dest: str
    dry_run: bool = False
    skipped: bool = False
    error: Exception | None = None


class Cascader:
    """Copies the secret at one KV v2 path to many others."""

    def __init__(self, client: LogicalClient, dry_run: bool = False) -> None:
        self._client = client
        self._dry_run = dry_run

    def cascade_path(self, src: str, dests: Iterable[str]) -> list[Result]:
        """Read the secret at ``src`` and write it to every path in ``dests``."""
        dests = list(dests)
        try:
            secret = self._client.read(_kv_v2_data_path(src))
        except Exception as exc:
            return [
                Result(src, dest, dry_run=self._dry_run, error=_wrap("read source", exc))
                for dest in dests
            ]
        if secret is None:
            return [
                Result(
                    src,
                    dest,
                    dry_run=self._dry_run,
                    error=RuntimeError(f"source path not found: {src}"),
                )
                for dest in dests
            ]

        inner = secret.get("data")
        data = dict(inner) if isinstance(inner, Mapping) else None

        results = []
        for dest in dests:
            result = Result(src, dest, dry_run=self._dry_run)
            if not self._dry_run:
                try:
                    self._client.write(_kv_v2_data_path(dest), {"data": data})
                except Exception as exc:
                    result.error = _wrap(f"write dest {dest}", exc)
            results.append(result)
        return results