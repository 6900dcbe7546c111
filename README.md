# vaultswap

A library of operations on secrets held in Vault KV v2 engines — copying,
cloning, mirroring, merging, comparing, deduplicating, flattening, patching,
archiving, exporting, importing, expiry checks and advisory locks — plus a
small command line for checking the health of Vault servers.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Command line

The `vaultswap` command has one subcommand, `health`, which queries
`/v1/sys/health` on each address concurrently:

```
vaultswap health --address https://vault-a.example.com,https://vault-b.example.com
vaultswap health -a https://vault.example.com -n team-a --json --timeout 5s
```

Options of `health`:

- `-a`, `--address` — address to check; may be repeated or comma-separated.
  Required.
- `-n`, `--namespace` — sent as the `X-Vault-Namespace` header.
- `--json` — print the statuses as a JSON array instead of text.
- `--timeout` — per-request timeout as a duration such as `5s`, `500ms` or
  `1m` (default `5s`).

In text mode each endpoint is reported as `[OK]`, `[SEALED]`, `[ERROR]` or
`[UNKNOWN]`. Responses 200, 429, 472 and 473 count as healthy; 501 and 503
as sealed; anything else is an error. The command exits with status 1 if any
endpoint is not healthy, or if its options are invalid.

The top-level command also accepts `--address`, `--token`, `--namespace`
(defaulting to `VAULT_ADDR`, `VAULT_TOKEN` and `VAULT_NAMESPACE`, with
`http://127.0.0.1:8200` as the address fallback), `--dry-run` and `--output`.
They are parsed but `health` does not use them.

## Library

Each operation works through a client object that you supply, returns result
objects (dataclasses) rather than printing, and most modules have a
`format_results` / `print_results` pair for readable output. Operations that
write accept `dry_run`, which reports what would happen without writing.
Failures on a single path are recorded in the result's `error` field; the
operations that raise instead are noted below.

| Module | Contents |
| --- | --- |
| `vaultswap.diff` | `compare(old, new)` → list of `Change` (`ChangeType.ADDED`, `REMOVED`, `MODIFIED`, `UNCHANGED`), `format_diff`, `print_diff`, `has_changes` |
| `vaultswap.diff2` | `Comparer(mask_values).compare(path, src, dst)` → `Result` with `added`, `removed`, `changed`; coloured `format_results` |
| `vaultswap.audit` | `Logger(out)` writing JSON-line entries (`log`, `log_rotate`, `log_sync`); `OperationSummary` with `format_summary` / `print_summary` |
| `vaultswap.namespace` | `apply_filters(namespaces, FilterOptions(...))`, `filter_namespaces`, `Lister(client).list(parent)` |
| `vaultswap.archive` | `Archiver.archive_path(path, base)` writes to `<base>/<UTC timestamp>/<path>` |
| `vaultswap.clone` | `Cloner(src, dst)` copies paths, skipping those whose data already matches |
| `vaultswap.compare` | `Comparer(src, dst).compare_path(path)` diffs the same path on two clients; raises `RuntimeError` if a read fails |
| `vaultswap.copier` | `Copier.copy_path(src, dst)` and `copy_paths(pairs)` |
| `vaultswap.cascade` | `Cascader.cascade_path(src, dests)` writes one secret to many paths under `secret/data/` |
| `vaultswap.dedup` | `Deduper` keeps the first key for each distinct value and removes the others |
| `vaultswap.expire` | `Checker` reads `secret/metadata/<path>` and works out expiry from `delete_version_after`; `expired_results` |
| `vaultswap.export` | `Exporter.export_paths(paths)`, `write_file(results, dest, "json" or "yaml")` (file mode 0600; other formats raise `ValueError`) |
| `vaultswap.flatten` | `flatten_map(data)` and `Flattener`, turning nested maps into `outer.inner` keys |
| `vaultswap.health` | `Checker(timeout).check(address, namespace)`, `check_many(targets)` with `Target` and `Status` |
| `vaultswap.importer` | `Importer.import_file(path, dry_run)` from a JSON object of `path -> {key: string}`; raises `OSError` / `ValueError` for unreadable or malformed files |
| `vaultswap.lock` | `Locker(client, lock_path)` with `lock(owner)` and `unlock()`, returning an `Action` |
| `vaultswap.merge` | `Merger(client, Options(overwrite, dry_run))` with `merge_path(dest, src)` and `merge_paths(dest, sources)` |
| `vaultswap.mirror` | `Mirrorer(src, dst).mirror_path(src_path, dst_path)` and `mirror_paths(pairs)` |
| `vaultswap.patch` | `Patcher.patch_path(path, patches)` updates given keys and keeps the rest; raises `RuntimeError` on read or write failure |

### Clients

The client objects are duck-typed; each module declares the methods it calls:

- `read_secret(path)` and `write_secret(path, data)` — archive, clone,
  compare, copier, export, flatten, merge, importer (write only). Archive
  also calls `read_secret_version(path)`; lock also calls
  `delete_secret(path)`. For lock, `read_secret` should raise when the path
  does not exist.
- `get(path)` / `put(path, data)` on a KV v2 mount, `get` returning `None`
  when absent — dedup, mirror.
- `read(path)` / `write(path, data)` on raw logical paths, `read` returning
  the secret's data or `None` — cascade, expire.
- `list(path)` returning the listed data or `None` — namespace.
- For patch, `read_secret(path)` returns the raw body whose `"data"` entry
  holds the key/value map.

### Example

```python
from vaultswap.diff import compare, format_diff

changes = compare({"user": "app"}, {"user": "app", "pass": "secret"})
print(format_diff(changes, True))
```

## What it does not do

- It contains no Vault API client for reading or writing secrets: every
  operation except the health check needs a client object supplied by the
  caller, as described above.
- The command line offers only `health`. The other operations are available
  from Python, not as commands.