"""Health checks against Vault's ``/v1/sys/health`` endpoint."""

from __future__ import annotations

import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterable

_HEALTHY_CODES = {200, 429, 472, 473}
_SEALED_CODES = {501, 503}


@dataclass
class Status:
    """Health of one Vault endpoint."""

    address: str
    namespace: str = ""
    healthy: bool = False
    sealed: bool = False
    version: str = ""
    error: str = ""


@dataclass(frozen=True)
class Target:
    """An address and optional namespace to check."""

    address: str
    namespace: str = ""


class Checker:
    """Checks Vault endpoints with a per-request timeout in seconds."""

    def __init__(self, timeout: float = 5.0) -> None:
        self.timeout = timeout

    def check(self, address: str, namespace: str = "") -> Status:
        """Query the health endpoint at ``address`` and classify the reply."""
        status = Status(address=address, namespace=namespace)
        try:
            request = urllib.request.Request(f"{address}/v1/sys/health", method="GET")
        except ValueError as exc:
            status.error = f"build request: {exc}"
            return status
        if namespace:
            request.add_header("X-Vault-Namespace", namespace)

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                code, headers = response.status, response.headers
        except urllib.error.HTTPError as exc:
            code, headers = exc.code, exc.headers
            exc.close()
        except (urllib.error.URLError, OSError, ValueError) as exc:
            status.error = f"request failed: {exc}"
            return status

        if code in _HEALTHY_CODES:
            status.healthy = True
            status.version = headers.get("X-Vault-Version", "")
        elif code in _SEALED_CODES:
            status.sealed = True
            status.version = headers.get("X-Vault-Version", "")
        else:
            status.error = f"unexpected status code: {code}"
        return status

    def check_many(self, targets: Iterable[Target]) -> list[Status]:
        """Check all targets concurrently, returning statuses in target order."""
        targets = list(targets)
        if not targets:
            return []
        with ThreadPoolExecutor(max_workers=len(targets)) as pool:
            return list(pool.map(lambda t: self.check(t.address, t.namespace), targets))