"""Comparison of secrets at the same paths on two Vault clients."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol

from vaultswap.diff import Change, compare, format_diff, has_changes


class SecretReader(Protocol):
    """A client that can read secrets by path."""

    def read_secret(self, path: str) -> Mapping[str, Any]: ...


@dataclass
class Result:
    """Comparison outcome for a single secret path."""

    path: str
    diff: list[Change] = field(default_factory=list)

    @property
    def has_diff(self) -> bool:
        """True when any key differs between source and destination."""
        return has_changes(self.diff)


class Comparer:
    """Reads secrets from two clients and diffs them."""

    def __init__(self, src: SecretReader, dst: SecretReader, mask_values: bool = True) -> None:
        self._src = src
        self._dst = dst
        self.mask_values = mask_values

    def compare_path(self, path: str) -> Result:
        """Diff the secret at ``path``; raises RuntimeError when a read fails."""
        try:
            src_data = self._src.read_secret(path)
        except Exception as exc:
            raise RuntimeError(f'read source "{path}": {exc}') from exc
        try:
            dst_data = self._dst.read_secret(path)
        except Exception as exc:
            raise RuntimeError(f'read destination "{path}": {exc}') from exc
        return Result(path=path, diff=compare(src_data or {}, dst_data or {}))

    def compare_paths(self, paths: Iterable[str]) -> list[Result]:
        """Compare every path, stopping at the first failure."""
        return [self.compare_path(path) for path in paths]


def format_results(results: Iterable[Result], mask_values: bool) -> str:
    """Render comparison results as text."""
    lines = []
    for r in results:
        if not r.has_diff:
            lines.append(f"[=] {r.path} — no changes")
            continue
        lines.append(f"[~] {r.path}")
        for line in format_diff(r.diff, mask_values).splitlines():
            lines.append(f"    {line}")
    return "".join(line + "\n" for line in lines)


def print_results(results: Iterable[Result], mask_values: bool) -> None:
    """Write comparison results to standard output."""
    sys.stdout.write(format_results(results, mask_values))