"""Cloning of secrets from one Vault client to another at the same paths."""

from __future__ import annotations

import sys
from dataclasses import dataclass
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


def _maps_equal(a: Mapping[str, Any] | None, b: Mapping[str, Any] | None) -> bool:
    a = a or {}
    b = b or {}
    if len(a) != len(b):
        return False
    return all(
        key in b and _format_value(value) == _format_value(b[key])
        for key, value in a.items()
    )


@dataclass
class Result:
    """Outcome of cloning a single secret path."""

    path: str
    skipped: bool = False
    dry_run: bool = False
    error: Exception | None = None


class Cloner:
    """Copies secrets from a source client to a destination client."""

    def __init__(self, src: SecretClient, dst: SecretClient, dry_run: bool = False) -> None:
        self._src = src
        self._dst = dst
        self._dry_run = dry_run

    def clone_path(self, path: str) -> Result:
        """Clone one path, skipping the write when the destination already matches."""
        try:
            src_data = self._src.read_secret(path)
        except Exception as exc:
            return Result(path=path, error=_wrap("read src", exc))

        try:
            dst_data = self._dst.read_secret(path)
        except Exception:
            pass
        else:
            if _maps_equal(src_data, dst_data):
                return Result(path=path, skipped=True, dry_run=self._dry_run)

        if self._dry_run:
            return Result(path=path, dry_run=True)

        try:
            self._dst.write_secret(path, src_data)
        except Exception as exc:
            return Result(path=path, error=_wrap("write dst", exc))
        return Result(path=path)

    def clone_paths(self, paths: Iterable[str]) -> list[Result]:
        """Clone each path in turn and return every result."""
        return [self.clone_path(path) for path in paths]


def format_results(results: Iterable[Result]) -> str:
    """Render clone results as text."""
    results = list(results)
    if not results:
        return "no paths to clone\n"
    lines = []
    for r in results:
        if r.error is not None:
            lines.append(f"  ERROR   {r.path}: {r.error}")
        elif r.skipped:
            lines.append(f"  SKIP    {r.path} (no changes)")
        elif r.dry_run:
            lines.append(f"  DRY-RUN {r.path} (would clone)")
        else:
            lines.append(f"  CLONED  {r.path}")
    return "".join(line + "\n" for line in lines)


def print_results(results: Iterable[Result]) -> None:
    """Write clone results to standard output."""
    sys.stdout.write(format_results(results))