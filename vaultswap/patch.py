"""Key-level updates of existing secrets that keep unrelated keys."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol

from vaultswap.diff import _format_value


class RawSecretClient(Protocol):
    """Reads the raw secret body (holding ``data``) or None, and writes data."""

    def read_secret(self, path: str) -> Mapping[str, Any] | None: ...

    def write_secret(self, path: str, data: Mapping[str, Any]) -> None: ...


@dataclass
class Result:
    """Outcome of patching one key."""

    path: str
    key: str
    old_value: str = ""
    new_value: str = ""
    dry_run: bool = False
    error: Exception | None = None


class Patcher:
    """Applies key/value patches to secrets without touching other keys."""

    def __init__(self, client: RawSecretClient, dry_run: bool = False) -> None:
        self._client = client
        self._dry_run = dry_run

    def patch_path(self, path: str, patches: Mapping[str, str]) -> list[Result]:
        """Merge ``patches`` into the secret at ``path`` and write it back.

        Raises RuntimeError when reading or writing fails.
        """
        try:
            secret = self._client.read_secret(path)
        except Exception as exc:
            raise RuntimeError(f"read {path}: {exc}") from exc

        existing: dict[str, Any] = {}
        if secret:
            inner = secret.get("data")
            if isinstance(inner, Mapping):
                existing.update(inner)

        results = []
        for key, new_value in patches.items():
            old = _format_value(existing[key]) if key in existing else ""
            results.append(
                Result(path=path, key=key, old_value=old, new_value=new_value,
                       dry_run=self._dry_run)
            )
            existing[key] = new_value

        if not self._dry_run:
            try:
                self._client.write_secret(path, existing)
            except Exception as exc:
                raise RuntimeError(f"write {path}: {exc}") from exc
        return results


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def format_results(results: Iterable[Result]) -> str:
    """Render patch results as text."""
    results = list(results)
    if not results:
        return "no patches applied\n"
    lines = []
    for r in results:
        if r.error is not None:
            lines.append(f"  [error]   {r.path}#{r.key}: {r.error}")
            continue
        label = "dry-run" if r.dry_run else "patched"
        if r.old_value == "":
            lines.append(f"  [{label}]  {r.path}#{r.key}  (new key)")
        else:
            lines.append(
                f"  [{label}]  {r.path}#{r.key}  {_quote(r.old_value)} -> {_quote(r.new_value)}"
            )
    return "".join(line + "\n" for line in lines)


def print_results(results: Iterable[Result]) -> None:
    """Write patch results to standard output."""
    sys.stdout.write(format_results(results))