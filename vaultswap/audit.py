"""Structured JSON-line audit logging and operation summaries."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TextIO


def _rfc3339_nano(moment: datetime) -> str:
    moment = moment.astimezone(timezone.utc)
    text = moment.strftime("%Y-%m-%dT%H:%M:%S")
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    return text + "Z"


def _rfc3339(moment: datetime) -> str:
    offset = moment.utcoffset()
    if offset is None or offset == timedelta(0):
        return moment.strftime("%Y-%m-%dT%H:%M:%S") + "Z"
    return moment.replace(microsecond=0).isoformat()


def _json_line(payload: dict) -> str:
    text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    for char, escaped in (
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("&", "\\u0026"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(char, escaped)
    return text


@dataclass(frozen=True)
class Entry:
    """A single audit log record."""

    timestamp: datetime
    operation: str
    namespace: str
    path: str
    dry_run: bool
    status: str
    message: str = ""

    def _as_dict(self) -> dict:
        payload = {
            "timestamp": _rfc3339_nano(self.timestamp),
            "operation": self.operation,
            "namespace": self.namespace,
            "path": self.path,
            "dry_run": self.dry_run,
            "status": self.status,
        }
        if self.message:
            payload["message"] = self.message
        return payload


class Logger:
    """Writes audit entries as JSON lines to a text stream (stdout by default)."""

    def __init__(self, out: TextIO | None = None) -> None:
        self._out = out if out is not None else sys.stdout

    def log(
        self,
        op: str,
        namespace: str,
        path: str,
        dry_run: bool,
        status: str,
        message: str = "",
    ) -> None:
        """Write one audit entry stamped with the current UTC time."""
        entry = Entry(
            timestamp=datetime.now(timezone.utc),
            operation=op,
            namespace=namespace,
            path=path,
            dry_run=dry_run,
            status=status,
            message=message,
        )
        self._out.write(_json_line(entry._as_dict()) + "\n")

    def log_rotate(self, namespace: str, path: str, dry_run: bool, status: str) -> None:
        """Record a rotation event."""
        self.log("rotate", namespace, path, dry_run, status, "")

    def log_sync(
        self,
        src_namespace: str,
        dst_namespace: str,
        path: str,
        dry_run: bool,
        status: str,
    ) -> None:
        """Record a sync event against the destination namespace."""
        message = f"src={src_namespace} dst={dst_namespace}"
        self.log("sync", dst_namespace, path, dry_run, status, message)


@dataclass
class OperationSummary:
    """Aggregated statistics for one operation."""

    operation: str
    started_at: datetime
    namespace: str = ""
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = 0
    dry_run: bool = False
    duration: timedelta = timedelta(0)


def _format_duration(duration: timedelta) -> str:
    """Round to milliseconds and render as e.g. ``120ms``, ``1.5s`` or ``1m30s``."""
    micros = duration // timedelta(microseconds=1)
    sign = "-" if micros < 0 else ""
    millis = (abs(micros) + 500) // 1000
    if millis == 0:
        return "0s"
    if millis < 1000:
        return f"{sign}{millis}ms"
    hours, rest = divmod(millis, 3_600_000)
    minutes, rest = divmod(rest, 60_000)
    seconds, fraction = divmod(rest, 1000)
    sec_text = str(seconds)
    if fraction:
        sec_text += "." + f"{fraction:03d}".rstrip("0")
    if hours:
        return f"{sign}{hours}h{minutes}m{sec_text}s"
    if minutes:
        return f"{sign}{minutes}m{sec_text}s"
    return f"{sign}{sec_text}s"


def format_summary(summary: OperationSummary) -> str:
    """Render the summary as an aligned two-column table."""
    label = summary.operation
    if summary.dry_run:
        label += " (dry-run)"
    rows = [("Operation:", label)]
    if summary.namespace:
        rows.append(("Namespace:", summary.namespace))
    started = summary.started_at
    if started.tzinfo is None:
        started = started.replace(tzinfo=timezone.utc)
    rows += [
        ("Started:", _rfc3339(started)),
        ("Duration:", _format_duration(summary.duration)),
        ("Total:", str(summary.total)),
        ("Succeeded:", str(summary.succeeded)),
        ("Failed:", str(summary.failed)),
        ("Skipped:", str(summary.skipped)),
    ]
    width = max(len(name) for name, _ in rows) + 2
    return "".join(f"{name:<{width}}{value}\n" for name, value in rows)


def print_summary(summary: OperationSummary) -> None:
    """Write the summary table to standard output."""
    sys.stdout.write(format_summary(summary))