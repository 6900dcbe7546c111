"""Command-line entry point: global flags and the ``health`` command."""

from __future__ import annotations

import argparse
import os
import sys
from dataclasses import asdict

from vaultswap.audit import _json_line
from vaultswap.expire import _parse_duration
from vaultswap.health import Checker, Target

_DESCRIPTION = """vaultswap is a CLI tool for rotating and syncing secrets across
HashiCorp Vault namespaces. It supports dry-run previews, diff output,
audit logging, snapshots, rollback, and more."""


def env_or_default(key: str, default: str) -> str:
    """Return the environment variable ``key``, or ``default`` when unset or empty."""
    return os.environ.get(key) or default


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vaultswap",
        description=_DESCRIPTION,
    )
    parser.add_argument(
        "--address",
        default=env_or_default("VAULT_ADDR", "http://127.0.0.1:8200"),
        help="Vault server address",
    )
    parser.add_argument(
        "--token",
        default=env_or_default("VAULT_TOKEN", ""),
        help="Vault token for authentication",
    )
    parser.add_argument(
        "--namespace",
        default=env_or_default("VAULT_NAMESPACE", ""),
        help="Vault namespace (Enterprise only)",
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Preview changes without writing to Vault"
    )
    parser.add_argument("--output", default="text", help="Output format: text or json")

    commands = parser.add_subparsers(dest="command")
    health = commands.add_parser(
        "health", help="Check the health of one or more Vault endpoints"
    )
    health.add_argument(
        "-a", "--address", dest="health_addresses", action="append", default=[],
        help="Vault address(es) to check (comma-separated or repeated)",
    )
    health.add_argument(
        "-n", "--namespace", dest="health_namespace", default="",
        help="Vault namespace to include in requests",
    )
    health.add_argument(
        "--json", dest="health_json", action="store_true", help="Output results as JSON"
    )
    health.add_argument(
        "--timeout", dest="health_timeout", default="5s", help="HTTP timeout per check"
    )
    return parser


def _status_dict(status) -> dict:
    payload = asdict(status)
    ordered = {
        "address": payload["address"],
        "namespace": payload["namespace"],
        "healthy": payload["healthy"],
        "sealed": payload["sealed"],
        "version": payload["version"],
        "error": payload["error"],
    }
    if not ordered["namespace"]:
        del ordered["namespace"]
    if not ordered["error"]:
        del ordered["error"]
    return ordered


def _run_health(args: argparse.Namespace) -> None:
    addresses = [
        part.strip()
        for raw in args.health_addresses
        for part in raw.split(",")
    ]
    if not args.health_addresses:
        raise ValueError('required flag(s) "address" not set')
    try:
        timeout = _parse_duration(args.health_timeout)
    except ValueError as exc:
        raise ValueError(
            f'invalid argument "{args.health_timeout}" for "--timeout" flag: {exc}'
        ) from exc

    checker = Checker(timeout.total_seconds())
    targets = [Target(address=addr, namespace=args.health_namespace) for addr in addresses]
    statuses = checker.check_many(targets)

    if args.health_json:
        sys.stdout.write(_json_line([_status_dict(s) for s in statuses]) + "\n")
        return

    all_healthy = True
    for s in statuses:
        if s.error:
            print(f"[ERROR]   {s.address} — {s.error}")
            all_healthy = False
        elif s.sealed:
            print(f"[SEALED]  {s.address} (v{s.version})")
            all_healthy = False
        elif s.healthy:
            print(f"[OK]      {s.address} (v{s.version})")
        else:
            print(f"[UNKNOWN] {s.address}")
            all_healthy = False

    if not all_healthy:
        raise RuntimeError("one or more Vault endpoints are unhealthy")


def main(argv: list[str] | None = None) -> int:
    """Run the command line and return the process exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0
    try:
        if args.command == "health":
            _run_health(args)
    except (ValueError, RuntimeError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())