"""Expiry checks for KV v2 secrets based on their version deletion settings."""

from __future__ import annotations

import math
import re
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Mapping, Protocol

from vaultswap.audit import _format_duration, _rfc3339
from vaultswap.diff import _format_value


class LogicalClient(Protocol):
    """Raw Vault logical access: ``read`` returns the secret's data or None."""

    def read(self, path: str) -> Mapping[str, Any] | None: ...


_UNIT_MICROS = {
    "ns": 0.001,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1_000.0,
    "s": 1_000_000.0,
    "m": 60_000_000.0,
    "h": 3_600_000_000.0,
}
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|h|m|s)")
_RFC3339 = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)


def _parse_duration(text: str) -> timedelta:
    """Parse a duration such as ``24h``, ``1h30m`` or ``1.5s``."""
    sign = -1 if text.startswith("-") else 1
    body = text[1:] if text[:1] in ("+", "-") else text
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration {text!r}")
    total = 0.0
    pos = 0
    while pos < len(body):
        match = _DURATION_PART.match(body, pos)
        if match is None:
            raise ValueError(f"invalid duration {text!r}")
        total += float(match.group(1)) * _UNIT_MICROS[match.group(2)]
        pos = match.end()
    return timedelta(microseconds=sign * total)


def _parse_rfc3339(text: str) -> datetime:
    match = _RFC3339.match(text)
    if match is None:
        raise ValueError(f"invalid timestamp {text!r}")
    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction = match.group(7) or ""
    micros = int((fraction + "000000")[:6])
    zone = match.group(8)
    if zone in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if zone[0] == "-" else 1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    return datetime(year, month, day, hour, minute, second, micros, tzinfo=tz)


def _current_version_created_time(data: Mapping[str, Any]) -> datetime | None:
    versions = data.get("versions")
    if not isinstance(versions, Mapping) or "current_version" not in data:
        return None
    version = versions.get(_format_value(data["current_version"]))
    if not isinstance(version, Mapping):
        return None
    created = version.get("created_time")
    if not isinstance(created, str):
        return None
    try:
        return _parse_rfc3339(created)
    except ValueError:
        return None


@dataclass
class Result:
    """Expiry information for a single secret path."""

    path: str
    namespace: str = ""
    ttl: timedelta = timedelta(0)
    created_at: datetime | None = None
    expires_at: datetime | None = None
    expired: bool = False
    no_ttl: bool = False
    error: Exception | None = None


class Checker:
    """Reads KV v2 metadata to work out when secret versions expire."""

    def __init__(self, client: LogicalClient, namespace: str = "") -> None:
        self._client = client
        self._namespace = namespace

    def check_path(self, path: str) -> Result:
        """Return the expiry state of the secret at ``path``."""
        result = Result(path=path, namespace=self._namespace)
        try:
            data = self._client.read(f"secret/metadata/{path}")
        except Exception as exc:
            err = RuntimeError(f"read metadata {path}: {exc}")
            err.__cause__ = exc
            result.error = err
            return result
        if data is None:
            result.error = LookupError(f"no metadata found at {path}")
            return result

        raw = data.get("delete_version_after")
        if isinstance(raw, str) and raw != "0s":
            try:
                ttl = _parse_duration(raw)
            except ValueError:
                ttl = None
            if ttl is not None:
                result.ttl = ttl
                created = _current_version_created_time(data)
                if created is not None:
                    result.created_at = created
                    result.expires_at = created + ttl
                    result.expired = datetime.now(timezone.utc) > result.expires_at

        result.no_ttl = result.expires_at is None
        return result

    def check_paths(self, paths: Iterable[str]) -> list[Result]:
        """Check every path in turn and return all results."""
        return [self.check_path(path) for path in paths]


def expired_results(results: Iterable[Result]) -> list[Result]:
    """Return only the results that have expired."""
    return [r for r in results if r.expired]


def _round_to_second(delta: timedelta) -> timedelta:
    seconds = delta / timedelta(seconds=1)
    rounded = math.floor(abs(seconds) + 0.5)
    return timedelta(seconds=rounded if seconds >= 0 else -rounded)


def _utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def format_results(results: Iterable[Result]) -> str:
    """Render expiry results as text."""
    results = list(results)
    if not results:
        return "no paths checked\n"
    lines = []
    for r in results:
        if r.error is not None:
            lines.append(f"[ERROR]   {r.path}: {r.error}")
        elif r.no_ttl or r.expires_at is None:
            lines.append(f"[NO TTL]  {r.path}: no expiry metadata")
        elif r.expired:
            expires = _utc(r.expires_at)
            lines.append(
                f"[EXPIRED] {r.path}: expired at {_rfc3339(expires)}"
                f" (ttl: {_format_duration(r.ttl)})"
            )
        else:
            expires = _utc(r.expires_at)
            remaining = _round_to_second(expires - datetime.now(timezone.utc))
            lines.append(
                f"[OK]      {r.path}: expires at {_rfc3339(expires)}"
                f" (in {_format_duration(remaining)})"
            )
    return "".join(line + "\n" for line in lines)


def print_results(results: Iterable[Result]) -> None:
    """Write expiry results to standard output."""
    sys.stdout.write(format_results(results))