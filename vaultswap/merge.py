"""Merging of keys from source secrets into a destination secret."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Protocol


class SecretClient(Protocol):
    """A client that can read and write secrets by path."""

    def read_secret(self, path: str) -> Mapping[str, Any]: ...

    def write_secret(self, path: str, data: Mapping[str, Any]) -> None: ...


def _wrap(prefix: str, exc: Exception) -> RuntimeError:
    err = RuntimeError(f"{prefix}: {exc}")
    err.__cause__ = exc
    return err


@dataclass
class Result:
    """Outcome of merging one source path into the destination."""

    path: str
    merged: int = 0
    skipped: int = 0
    dry_run: bool = False
    error: Exception | None = None


@dataclass(frozen=True)
class Options:
    """Merge behaviour: whether existing keys are replaced, and dry-run."""

    overwrite: bool = False
    dry_run: bool = False


class Merger:
    """Merges secrets from source paths into a destination path."""

    def __init__(self, client: SecretClient, options: Options | None = None) -> None:
        self._client = client
        self.options = options if options is not None else Options()

    def merge_paths(self, dest: str, sources: Iterable[str]) -> list[Result]:
        """Merge every source into ``dest`` in turn, one result per source."""
        return [self.merge_path(dest, src) for src in sources]

    def merge_path(self, dest: str, src: str) -> Result:
        """Merge the keys of ``src`` into ``dest``."""
        result = Result(path=src, dry_run=self.options.dry_run)

        try:
            src_data = self._client.read_secret(src)
        except Exception as exc:
            result.error = _wrap(f'read source "{src}"', exc)
            return result

        try:
            dest_data = self._client.read_secret(dest)
        except Exception:
            # The destination may not exist yet.
            dest_data = {}

        merged = dict(dest_data or {})
        for key, value in (src_data or {}).items():
            if key in merged and not self.options.overwrite:
                result.skipped += 1
                continue
            merged[key] = value
            result.merged += 1

        if result.merged == 0:
            return result

        if not self.options.dry_run:
            try:
                self._client.write_secret(dest, merged)
            except Exception as exc:
                result.error = _wrap(f'write dest "{dest}"', exc)
        return result