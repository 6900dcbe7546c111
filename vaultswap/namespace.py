"""Listing and filtering of Vault namespaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol, Sequence


@dataclass
class FilterOptions:
    """Criteria for selecting namespaces."""

    prefix: str = ""
    substring: str = ""
    exclude: Sequence[str] = field(default_factory=tuple)


def apply_filters(namespaces: Iterable[str], options: FilterOptions) -> list[str]:
    """Return the namespaces that pass every criterion in ``options``."""
    excluded = {name.strip() for name in options.exclude}
    return [
        ns
        for ns in namespaces
        if ns not in excluded
        and (not options.prefix or ns.startswith(options.prefix))
        and (not options.substring or options.substring in ns)
    ]


class ListClient(Protocol):
    """A client able to LIST a Vault path, returning its data or None."""

    def list(self, path: str) -> Mapping[str, Any] | None: ...


class Lister:
    """Lists child namespaces through a Vault client."""

    def __init__(self, client: ListClient) -> None:
        self._client = client

    def list(self, parent: str = "") -> list[str]:
        """Return the child namespaces of ``parent`` (top level when empty)."""
        path = "sys/namespaces"
        if parent:
            path = f"{parent.strip('/')}/sys/namespaces"
        try:
            data = self._client.list(path)
        except Exception as exc:
            raise RuntimeError(f"listing namespaces at {path!r}: {exc}") from exc
        if not data or "keys" not in data:
            return []
        keys = data["keys"]
        if not isinstance(keys, list):
            raise TypeError(f"unexpected type for namespace keys: {type(keys).__name__}")
        return [name.removesuffix("/") for name in keys if isinstance(name, str)]


def filter_namespaces(namespaces: list[str], substr: str) -> list[str]:
    """Return the namespaces containing ``substr``; all of them when it is empty."""
    if not substr:
        return namespaces
    return [ns for ns in namespaces if substr in ns]