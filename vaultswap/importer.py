"""Import of secrets from a JSON file of ``path -> {key: value}`` into Vault."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Mapping, Protocol


class SecretWriter(Protocol):
    """A client that can write secrets by path."""

    def write_secret(self, path: str, data: Mapping[str, Any]) -> None: ...


@dataclass
class Result:
    """Outcome of importing a single secret path."""

    path: str
    written: bool = False
    dry_run: bool = False
    error: Exception | None = None


def _load_payload(handle) -> dict[str, dict[str, str]]:
    try:
        payload = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ValueError(f"decode import file: {exc}") from exc
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValueError("decode import file: expected an object of paths")
    checked: dict[str, dict[str, str]] = {}
    for path, data in payload.items():
        if data is None:
            data = {}
        if not isinstance(data, dict) or not all(isinstance(v, str) for v in data.values()):
            raise ValueError(
                f"decode import file: secret {path!r} must map keys to strings"
            )
        checked[path] = data
    return checked


class Importer:
    """Writes the secrets described by an import file."""

    def __init__(self, client: SecretWriter) -> None:
        self._client = client

    def import_file(self, file_path: str | os.PathLike, dry_run: bool = False) -> list[Result]:
        """Import every path in ``file_path``; nothing is written when dry-running.

        Raises OSError when the file cannot be opened and ValueError when it
        is not a JSON object of string maps.
        """
        try:
            handle = open(file_path, encoding="utf-8")
        except OSError as exc:
            raise OSError(f"open import file: {exc}") from exc
        with handle:
            payload = _load_payload(handle)

        results = []
        for path, data in payload.items():
            result = Result(path=path, dry_run=dry_run)
            if not dry_run:
                try:
                    self._client.write_secret(path, dict(data))
                except Exception as exc:
                    result.error = exc
                else:
                    result.written = True
            results.append(result)
        return results