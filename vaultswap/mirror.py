"""Mirroring of KV v2 secrets from a source client to a destination client."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol


class KVClient(Protocol):
    """KV v2 access: ``get`` returns the secret data or None."""

    def get(self, path: str) -> Mapping[str, Any] | None: ...

    def put(self, path: str, data: Mapping[str, Any]) -> Any: ...


def _wrap(prefix: str, exc: Exception) -> RuntimeError:
    err = RuntimeError(f"{prefix}: {exc}")
    err.__cause__ = exc
    return err


@dataclass
class Result:
    """Outcome of mirroring a single path."""

    source_path: str
    dest_path: str
    skipped: bool = False
    dry_run: bool = False
    error: Exception | None = None


class Mirrorer:
    """Copies secrets to the destination, overwriting what is there."""

    def __init__(self, src: KVClient, dst: KVClient, dry_run: bool = False) -> None:
        self._src = src
        self._dst = dst
        self._dry_run = dry_run

    def mirror_path(self, src_path: str, dst_path: str) -> Result:
        """Mirror the secret at ``src_path`` to ``dst_path``."""
        result = Result(source_path=src_path, dest_path=dst_path, dry_run=self._dry_run)
        try:
            data = self._src.get(src_path)
        except Exception as exc:
            result.error = _wrap(f"read {src_path}", exc)
            return result
        if data is None:
            result.skipped = True
            return result

        if self._dry_run:
            return result

        try:
            self._dst.put(dst_path, data)
        except Exception as exc:
            result.error = _wrap(f"write {dst_path}", exc)
        return result

    def mirror_paths(self, pairs: Iterable[tuple[str, str]]) -> list[Result]:
        """Mirror every ``(src, dst)`` pair and return all results."""
        return [self.mirror_path(src, dst) for src, dst in pairs]


def format_results(results: Iterable[Result]) -> str:
    """Render mirror results as text."""
    results = list(results)
    if not results:
        return "no paths to mirror\n"
    lines = []
    for r in results:
        if r.error is not None:
            lines.append(f"[error]   {r.source_path} -> {r.dest_path}: {r.error}")
        elif r.skipped:
            lines.append(f"[skipped] {r.source_path} -> {r.dest_path} (no data)")
        elif r.dry_run:
            lines.append(f"[dry-run] {r.source_path} -> {r.dest_path}")
        else:
            lines.append(f"[mirrored] {r.source_path} -> {r.dest_path}")
    return "".join(line + "\n" for line in lines)


def print_results(results: Iterable[Result]) -> None:
    """Write mirror results to standard output."""
    sys.stdout.write(format_results(results))