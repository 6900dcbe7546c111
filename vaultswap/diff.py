"""Key-level comparison of secret maps with optionally masked, readable output."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

_MASK = "*" * 8


class ChangeType(str, Enum):
    """Kind of difference detected for a single secret key."""

    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class Change:
    """A single key-level difference between two secret maps."""

    key: str
    type: ChangeType
    old_val: str = ""
    new_val: str = ""


def _format_value(value: Any) -> str:
    """Render a secret value the way it is shown and compared everywhere."""
    if value is None:
        return "<nil>"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = repr(value)
        return text[:-2] if text.endswith(".0") else text
    if isinstance(value, Mapping):
        inner = " ".join(
            f"{k}:{_format_value(value[k])}" for k in sorted(value, key=str)
        )
        return f"map[{inner}]"
    if isinstance(value, (list, tuple)):
        return "[" + " ".join(_format_value(v) for v in value) + "]"
    return str(value)


def compare(old: Mapping[str, Any], new: Mapping[str, Any]) -> list[Change]:
    """Return the changes from ``old`` to ``new``, one per key, sorted by key.

    Keys only in ``old`` are removed, keys only in ``new`` are added, keys in
    both are modified or unchanged depending on their rendered values.
    """
    changes: list[Change] = []
    for key in sorted(set(old) | set(new)):
        in_old, in_new = key in old, key in new
        if in_old and not in_new:
            changes.append(
                Change(key, ChangeType.REMOVED, old_val=_format_value(old[key]))
            )
        elif in_new and not in_old:
            changes.append(
                Change(key, ChangeType.ADDED, new_val=_format_value(new[key]))
            )
        else:
            old_val = _format_value(old[key])
            new_val = _format_value(new[key])
            kind = ChangeType.MODIFIED if old_val != new_val else ChangeType.UNCHANGED
            changes.append(Change(key, kind, old_val, new_val))
    return changes


def _shown(value: str, mask: bool) -> str:
    return _MASK if mask else value


def format_diff(changes: Iterable[Change], mask_values: bool) -> str:
    """Render changes as text, one line per change."""
    changes = list(changes)
    if not changes:
        return "  (no changes)\n"
    lines = []
    for change in changes:
        key = f"{change.key:<30}"
        if change.type is ChangeType.ADDED:
            lines.append(f"  + {key} {_shown(change.new_val, mask_values)}")
        elif change.type is ChangeType.REMOVED:
            lines.append(f"  - {key} {_shown(change.old_val, mask_values)}")
        elif change.type is ChangeType.MODIFIED:
            lines.append(
                f"  ~ {key} {_shown(change.old_val, mask_values)}"
                f" → {_shown(change.new_val, mask_values)}"
            )
        elif change.type is ChangeType.UNCHANGED:
            lines.append(f"    {key} (unchanged)")
    return "".join(line + "\n" for line in lines)


def print_diff(changes: Iterable[Change], mask_values: bool) -> None:
    """Write the rendered diff to standard output."""
    sys.stdout.write(format_diff(changes, mask_values))


def has_changes(changes: Iterable[Change]) -> bool:
    """Return True if any change is something other than unchanged."""
    return any(change.type is not ChangeType.UNCHANGED for change in changes)