"""Export of Vault secrets to a local JSON or YAML file."""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol

import yaml


class SecretReader(Protocol):
    """A client that can read secrets by path."""

    def read_secret(self, path: str) -> Mapping[str, Any]: ...


@dataclass
class Result:
    """Outcome of reading one path for export."""

    path: str
    data: Mapping[str, Any] | None = None
    error: Exception | None = None


class Exporter:
    """Reads secrets for writing to a local file."""

    def __init__(self, client: SecretReader) -> None:
        self._client = client

    def export_paths(self, paths: Iterable[str]) -> list[Result]:
        """Read every path and return one result each."""
        results = []
        for path in paths:
            try:
                results.append(Result(path=path, data=self._client.read_secret(path)))
            except Exception as exc:
                results.append(Result(path=path, error=exc))
        return results


def write_file(results: Iterable[Result], dest: str | os.PathLike, fmt: str) -> None:
    """Write successful results to ``dest`` as ``json`` or ``yaml``, mode 0600."""
    payload = {r.path: r.data for r in results if r.error is None}
    try:
        if fmt == "yaml":
            text = yaml.safe_dump(payload, sort_keys=True, allow_unicode=True)
        elif fmt == "json":
            text = json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False)
        else:
            raise ValueError(f'unsupported format "{fmt}": must be json or yaml')
    except (TypeError, yaml.YAMLError) as exc:
        raise ValueError(f"marshal: {exc}") from exc

    fd = os.open(dest, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        handle.write(text)


def format_results(results: Iterable[Result], dest: str, fmt: str, dry_run: bool) -> str:
    """Render a summary of export results."""
    lines = []
    ok = 0
    for r in results:
        if r.error is not None:
            lines.append(f"  ERROR   {r.path}: {r.error}")
        else:
            ok += 1
            lines.append(f"  OK      {r.path}")
    lines.append("")
    if dry_run:
        lines.append(f"[dry-run] would export {ok} path(s) to {dest} (format: {fmt})")
    else:
        lines.append(f"exported {ok} path(s) → {dest} (format: {fmt})")
    return "".join(line + "\n" for line in lines)


def print_results(results: Iterable[Result], dest: str, fmt: str, dry_run: bool) -> None:
    """Write the export summary to standard output."""
    sys.stdout.write(format_results(results, dest, fmt, dry_run))