"""Copying of secrets from one path to another through a single client."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol


class SecretClient(Protocol):
    """A client that can read and write secrets by path."""

    def read_secret(self, path: str) -> Mapping[str, Any]: ...

    def write_secret(self, path: str, data: Mapping[str, Any]) -> None: ...


def _wrap(message: str, exc: Exception) -> RuntimeError:
    err = RuntimeError(f"{message}: {exc}")
    err.__cause__ = exc
    return err


@dataclass
class Result:
    """Outcome of copying one source path to one destination path."""

    src: str
    dst: str
    dry_run: bool = False
    error: Exception | None = None


class Copier:
    """Copies secrets between paths."""

    def __init__(self, client: SecretClient, dry_run: bool = False) -> None:
        self._client = client
        self._dry_run = dry_run

    def copy_path(self, src: str, dst: str) -> Result:
        """Read the secret at ``src`` and write it to ``dst``."""
        result = Result(src=src, dst=dst, dry_run=self._dry_run)
        try:
            data = self._client.read_secret(src)
        except Exception as exc:
            result.error = _wrap(f'read "{src}"', exc)
            return result

        if self._dry_run:
            return result

        try:
            self._client.write_secret(dst, data)
        except Exception as exc:
            result.error = _wrap(f'write "{dst}"', exc)
        return result

    def copy_paths(self, pairs: Iterable[tuple[str, str]]) -> list[Result]:
        """Copy every ``(src, dst)`` pair and return all results."""
        return [self.copy_path(src, dst) for src, dst in pairs]


def format_results(results: Iterable[Result]) -> str:
    """Render copy results as text."""
    results = list(results)
    if not results:
        return "no paths to copy\n"
    lines = []
    for r in results:
        if r.error is not None:
            lines.append(f"[error]  {r.src} → {r.dst}: {r.error}")
        elif r.dry_run:
            lines.append(f"[dry-run] {r.src} → {r.dst}")
        else:
            lines.append(f"[copied]  {r.src} → {r.dst}")
    return "".join(line + "\n" for line in lines)


def print_results(results: Iterable[Result]) -> None:
    """Write copy results to standard output."""
    sys.stdout.write(format_results(results))