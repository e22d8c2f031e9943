"""The complete in-memory storage backend."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

from logmonitor.errors import ConflictError
from logmonitor.filters import (
    CheckResultListFilter,
    ListOptions,
    LogEntryListFilter,
    LogFileListFilter,
    Page,
    ServerListFilter,
)
from logmonitor.memory.checks import CheckResultStore
from logmonitor.memory.chunks import LogChunkStore
from logmonitor.memory.core import ascending, paged
from logmonitor.memory.entries import LogEntryStore
from logmonitor.memory.logfiles import LogFileStore
from logmonitor.memory.servers import ServerStore
from logmonitor.models import CheckResult, LogChunk, LogEntry, LogFile, Server

T = TypeVar("T")


class MemoryStorage(
    ServerStore,
    LogFileStore,
    LogEntryStore,
    LogChunkStore,
    CheckResultStore,
):
    """In-memory storage offering every repository operation."""

    def __enter__(self) -> MemoryStorage:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def ping(self) -> None:
        """Report readiness; the in-memory storage is always ready."""

    def close(self) -> None:
        """Release resources; the in-memory storage holds none."""

    # Each store sorts its own models; pick the right sort key explicitly.
    def _sorted_page(self, owner: type, items: list[T], filters: ListOptions) -> Page[T]:
        items.sort(key=owner._sort_key(self, filters.sort), reverse=not ascending(filters.order))
        return paged(items, filters.offset, filters.limit)

    def list_servers_filtered(self, filters: ServerListFilter) -> Page[Server]:
        """Return one filtered, sorted page of servers."""
        with self._lock:
            items = [
                self._clone(item)
                for item in self._servers.values()
                if self._server_matches(item, filters)
            ]
        return self._sorted_page(ServerStore, items, filters)

    def list_log_files_filtered(self, filters: LogFileListFilter) -> Page[LogFile]:
        """Return one filtered, sorted page of log files."""
        with self._lock:
            items = [
                self._clone(item)
                for item in self._log_files.values()
                if self._log_file_matches(item, filters)
            ]
        return self._sorted_page(LogFileStore, items, filters)

    def list_log_entries_filtered(self, filters: LogEntryListFilter) -> Page[LogEntry]:
        """Return one filtered, sorted page of log entries."""
        with self._lock:
            items = [
                self._clone(item)
                for item in self._entries.values()
                if self._entry_matches(item, filters)
            ]
        return self._sorted_page(LogEntryStore, items, filters)

    def list_check_results_filtered(self, filters: CheckResultListFilter) -> Page[CheckResult]:
        """Return one filtered, sorted page of check results."""
        with self._lock:
            items = [
                self._clone(item)
                for item in self._checks.values()
                if self._check_matches(item, filters)
            ]
        return self._sorted_page(CheckResultStore, items, filters)

    def create_log_entries_with_chunks(
        self,
        entries: Iterable[LogEntry | None],
        chunks: Iterable[LogChunk | None],
    ) -> None:
        """Store entries and chunks together; nothing is stored if any of them is rejected."""
        entry_batch = list(entries)
        chunk_batch = list(chunks)
        with self._lock:
            self._validate_entry_batch_locked(entry_batch)
            self._validate_chunk_batch_locked(chunk_batch)
            for entry in entry_batch:
                self._store_log_entry_locked(entry)
            for chunk in chunk_batch:
                self._store_log_chunk_locked(chunk)

    def _validate_entry_batch_locked(self, entries: list[LogEntry | None]) -> None:
        ids: set[str] = set()
        lines: set[tuple[str, int]] = set()
        for entry in entries:
            if entry is None:
                raise ConflictError("log entry is nil")
            self._validate_log_entry_locked(entry)
            if entry.id:
                if entry.id in ids:
                    raise ConflictError(f'log entry "{entry.id}" is duplicated in batch')
                ids.add(entry.id)
            key = (entry.log_file_id, entry.line_number)
            if key in lines:
                raise ConflictError(
                    f"log entry line {entry.line_number} is duplicated in batch"
                )
            lines.add(key)

    def _validate_chunk_batch_locked(self, chunks: list[LogChunk | None]) -> None:
        ids: set[str] = set()
        numbers: set[tuple[str, int]] = set()
        for chunk in chunks:
            if chunk is None:
                raise ConflictError("log chunk is nil")
            self._validate_log_chunk_locked(chunk)
            if chunk.id:
                if chunk.id in ids:
                    raise ConflictError(f'log chunk "{chunk.id}" is duplicated in batch')
                ids.add(chunk.id)
            key = (chunk.log_file_id, chunk.chunk_number)
            if key in numbers:
                raise ConflictError(
                    f"log chunk number {chunk.chunk_number} is duplicated in batch"
                )
            numbers.add(key)