"""Archiving of current secret versions to timestamped paths inside Vault."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Protocol


class ArchiveClient(Protocol):
    """The Vault operations the archiver needs."""

    def read_secret(self, path: str) -> Mapping[str, Any]: ...

    def read_secret_version(self, path: str) -> int: ...

    def write_secret(self, path: str, data: Mapping[str, Any]) -> None: ...


def _wrap(prefix: str, exc: Exception) -> RuntimeError:
    err = RuntimeError(f"{prefix}: {exc}")
    err.__cause__ = exc
    return err


@dataclass
class Result:
    """Outcome of archiving a single path."""

    path: str
    version: int = 0
    skipped: bool = False
    dry_run: bool = False
    error: Exception | None = None


class Archiver:
    """Copies secrets to ``<base>/<timestamp>/<path>`` inside Vault."""

    def __init__(self, client: ArchiveClient, dry_run: bool = False) -> None:
        self._client = client
        self._dry_run = dry_run

    def archive_path(self, path: str, archive_base: str) -> Result:
        """Read the secret at ``path`` and write a timestamped copy under ``archive_base``."""
        try:
            data = self._client.read_secret(path)
        except Exception as exc:
            return Result(path=path, error=_wrap("read", exc))

        try:
            version = self._client.read_secret_version(path)
        except Exception as exc:
            return Result(path=path, error=_wrap("read version", exc))

        if self._dry_run:
            return Result(path=path, version=version, dry_run=True)

        stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        dest = f"{archive_base}/{stamp}/{path}"
        try:
            self._client.write_secret(dest, data)
        except Exception as exc:
            return Result(path=path, error=_wrap("write archive", exc))

        return Result(path=path, version=version)

    def archive_paths(self, paths: Iterable[str], archive_base: str) -> list[Result]:
        """Archive each path in turn and return every result."""
        return [self.archive_path(path, archive_base) for path in paths]


def format_results(results: Iterable[Result]) -> str:
    """Render archive results as text."""
    results = list(results)
    if not results:
        return "no paths to archive\n"
    lines = []
    for r in results:
        if r.error is not None:
            lines.append(f"  ERROR    {r.path}: {r.error}")
        elif r.dry_run:
            lines.append(f"  DRY-RUN  {r.path} (version {r.version})")
        elif r.skipped:
            lines.append(f"  SKIPPED  {r.path}")
        else:
            lines.append(f"  ARCHIVED {r.path} (version {r.version})")
    return "".join(line + "\n" for line in lines)


def print_results(results: Iterable[Result]) -> None:
    """Write archive results to standard output."""
    sys.stdout.write(format_results(results))