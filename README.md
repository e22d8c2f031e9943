# logmonitor

The storage layer of a log integrity monitor. It keeps track of monitored
servers, the log files discovered on them, hashed log entries, aggregate chunk
hashes and the results of integrity checks.

## What is inside

- `logmonitor.models`: the data model (`Server`, `LogFile`, `LogEntry`,
  `LogChunk`, `CheckResult`, `FileIdentity`) as dataclasses, and its enums
  (`ServerStatus`, `ServerManagedBy`, `AuthType`, `OSType`, `LogType`,
  `CheckStatus`, `ProblemSeverity`, `ProblemType`).
  `severity_for_check_status` and `problem_type_for_check_status` map a check
  status to a problem classification: `tampered` is critical /
  `integrity_tampered`, `error` is error / `integrity_check_error`, anything
  else gives `None`.
- `logmonitor.errors`: `StorageError` and its subclasses `NotFoundError` and
  `ConflictError`, raised by the stores.
- `logmonitor.filters`: `ListOptions` (`q`, `offset`, `limit`, `sort`,
  `order`) plus the `ServerListFilter`, `LogFileListFilter`,
  `LogEntryListFilter` and `CheckResultListFilter` filters, and the `Page`
  result (`items`, `total`, `offset`, `limit`).
- `logmonitor.memory.storage.MemoryStorage`: a thread-safe in-memory
  repository with cascading deletes, batch validation that never half-applies
  a batch, search, sorting and paging. It is made of the stores in
  `logmonitor.memory.servers`, `logfiles`, `entries`, `chunks` and `checks`,
  built on the shared state and helpers in `logmonitor.memory.core`.
- `logmonitor.security`: `StringCipher`, AES-GCM encryption of short secrets
  such as stored credentials, keyed by the SHA-256 digest of an application
  secret. `new_string_cipher` returns `None` for a blank secret.
- `logmonitor.runtimeinfo`: `State`, a thread-safe holder of runtime
  metadata (dry-run flag, storage backend name, scheduler flag, startup
  warnings and environment checks) that yields detached `Snapshot` objects,
  plus the `Check` and `Readiness` records for readiness reports.
- `logmonitor.sqlfilter`: `SqlFilter`, `normalize_page`, `order_direction`
  and `order_by`, helpers for building parameterised `WHERE` and `ORDER BY`
  clauses with `$1`, `$2`, ... placeholders.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Using the in-memory storage

```python
from logmonitor.errors import ConflictError, NotFoundError
from logmonitor.filters import LogEntryListFilter
from logmonitor.memory.storage import MemoryStorage
from logmonitor.models import LogChunk, LogEntry, LogFile, LogType, Server

store = MemoryStorage()

server = Server(id="srv-1", name="web-1", host="192.0.2.10", port=22, username="demo")
store.create_server(server)        # status defaults to inactive, owner to api

log_file = LogFile(id="log-1", server_id=server.id, path="/var/log/auth.log",
                   log_type=LogType.AUTH, is_active=True)
store.create_log_file(log_file)

entries = [
    LogEntry(id="entry-1", log_file_id=log_file.id, line_number=1, content="accepted", hash="h1"),
    LogEntry(id="entry-2", log_file_id=log_file.id, line_number=2, content="session", hash="h2"),
]
chunks = [
    LogChunk(id="chunk-1", log_file_id=log_file.id, chunk_number=1,
             from_line_number=1, to_line_number=2, entries_count=2, hash="c1"),
]
store.create_log_entries_with_chunks(entries, chunks)

print(store.count_log_entries(log_file.id))        # 2
print(store.get_max_line_number(log_file.id))      # 2

page = store.list_log_entries_filtered(
    LogEntryListFilter(log_file_id=log_file.id, q="sess", order="asc"))
print(page.total, [item.line_number for item in page.items])   # 1 [2]

try:
    store.create_log_entries_with_chunks(entries, [])
except ConflictError as exc:
    print("rejected:", exc)

store.delete_server(server.id)                     # removes log files, entries, chunks, checks
try:
    store.get_log_file_by_id(log_file.id)
except NotFoundError:
    print("gone")
```

Behaviour worth knowing:

- Every read returns detached copies, so changing a returned object never
  changes what the store holds.
- `create_*` methods fill in missing identifiers (`srv_…`, `log_…`,
  `entry_…`, `chunk_…`, `check_…`) and timestamps on the objects passed in.
- Server names and hosts must be unique, ignoring case; a log file path must
  be unique per server; a line number or chunk number must be unique per log
  file. Violations raise `ConflictError`; references to missing servers or log
  files raise `NotFoundError`.
- The `list_*_filtered` methods sort ascending only when `order` is `"asc"`
  (ignoring case and blanks); any other value sorts descending. A `limit` of
  zero or less returns everything after `offset`.
- `MemoryStorage` is also a context manager; `ping()` and `close()` do
  nothing.

## Encrypting stored secrets

```python
from logmonitor.security import new_string_cipher

cipher = new_string_cipher("secret")
sealed = cipher.encrypt("token")
assert sealed.startswith("enc:v1:")
assert cipher.decrypt(sealed) == "token"
assert cipher.decrypt("legacy-plaintext") == "legacy-plaintext"
```

Values that are already encrypted are not encrypted twice, and values without
the `enc:v1:` prefix pass through `decrypt` unchanged. A damaged or foreign
encrypted value raises `SecurityError`.

## Runtime state

```python
from logmonitor.runtimeinfo import EnvCheck, EnvCheckStatus, State

state = State()
state.configure(dry_run=True, storage_backend="memory")
state.add_warning("ssh_unreachable", "server web-1 skipped")
state.replace_env_checks([EnvCheck("DB_DSN", EnvCheckStatus.MISSING, "not set")])
print(state.snapshot().to_dict())
```

`to_dict` gives `None` instead of an empty list for warnings and environment
checks.

## Building SQL clauses

```python
from logmonitor.filters import ListOptions
from logmonitor.sqlfilter import SqlFilter, normalize_page, order_by

sql = SqlFilter()
sql.add("status = $%d", "active")
sql.add_search(["name", "host"], " Web ")
print(sql.where_sql())  # " WHERE status = $1 AND (LOWER(name) LIKE $2 OR LOWER(host) LIKE $2)"
print(sql.args)         # ['active', '%web%']

print(order_by("bogus", {"name": "name"}, "name", "", "ASC"))  # " ORDER BY name ASC"
print(normalize_page(ListOptions(offset=-5)))                  # offset 0, limit 50
```

## What it does not do

The only storage backend included is the in-memory one; nothing is persisted
to disk or to a database. `logmonitor.sqlfilter` only builds clause text and
argument lists for a SQL backend; it runs no queries. The package also has no
command-line program, no HTTP API and no code that connects to servers or
reads their logs.