"""Per-path secret diffs grouped into added, removed and changed keys."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from vaultswap.diff import _format_value

_RESET = "\033[0m"
_RED = "\033[31m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"


@dataclass
class Result:
    """Diff output for a single secret path."""

    path: str
    added: dict[str, str] = field(default_factory=dict)
    removed: dict[str, str] = field(default_factory=dict)
    changed: dict[str, tuple[str, str]] = field(default_factory=dict)
    error: Exception | None = None

    def has_changes(self) -> bool:
        """Return True if any key was added, removed or changed."""
        return bool(self.added or self.removed or self.changed)


@dataclass
class Comparer:
    """Diffs two secret maps, optionally masking values character by character."""

    mask_values: bool = False

    def _mask(self, value: str) -> str:
        return "*" * len(value) if self.mask_values else value

    def compare(self, path: str, src: Mapping[str, Any], dst: Mapping[str, Any]) -> Result:
        """Diff ``src`` against ``dst`` for ``path``."""
        result = Result(path=path)
        for key, src_value in src.items():
            src_text = _format_value(src_value)
            if key not in dst:
                result.removed[key] = self._mask(src_text)
                continue
            dst_text = _format_value(dst[key])
            if src_text != dst_text:
                result.changed[key] = (self._mask(src_text), self._mask(dst_text))
        for key, dst_value in dst.items():
            if key not in src:
                result.added[key] = self._mask(_format_value(dst_value))
        return result


def format_results(results: Iterable[Result]) -> str:
    """Render diff results as coloured text."""
    lines = []
    for r in results:
        if r.error is not None:
            lines.append(f"[error] {r.path}: {r.error}")
            continue
        if not r.has_changes():
            lines.append(f"[no diff] {r.path}")
            continue
        lines.append(f"[diff] {r.path}")
        for key in sorted(r.added):
            lines.append(f"  {_GREEN}+ {key} = {r.added[key]}{_RESET}")
        for key in sorted(r.removed):
            lines.append(f"  {_RED}- {key} = {r.removed[key]}{_RESET}")
        for key in sorted(r.changed):
            old, new = r.changed[key]
            lines.append(f"  {_YELLOW}~ {key}: {old} -> {new}{_RESET}")
    return "".join(line + "\n" for line in lines)


def print_results(results: Iterable[Result]) -> None:
    """Write diff results to standard output."""
    sys.stdout.write(format_results(results))