"""In-memory storage of hashed log entries."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

from logmonitor.errors import ConflictError, NotFoundError
from logmonitor.filters import LogEntryListFilter, Page
from logmonitor.memory.core import (
    StorageCore,
    ascending,
    matches_search,
    new_id,
    paged,
    paginate,
)
from logmonitor.models import LogEntry


class LogEntryStore(StorageCore):
    """Log entry operations of the in-memory storage."""

    def create_log_entry(self, entry: LogEntry) -> None:
        """Store one entry; fills in its id and collection time when missing."""
        with self._lock:
            self._validate_log_entry_locked(entry)
            self._store_log_entry_locked(entry)

    def create_log_entries(self, entries: Iterable[LogEntry]) -> None:
        """Store a batch of entries after validating all of them against stored data."""
        batch = list(entries)
        with self._lock:
            for entry in batch:
                self._validate_log_entry_locked(entry)
            for entry in batch:
                self._store_log_entry_locked(entry)

    def get_log_entry_by_line(self, log_file_id: str, line_number: int) -> LogEntry:
        """Return a copy of the entry at a line of a log file."""
        with self._lock:
            entry_id = self._entries_by_log_file.get(log_file_id, {}).get(line_number)
            if entry_id is None:
                raise NotFoundError(f'log entry "{log_file_id}" line {line_number}')
            return self._clone(self._entries[entry_id])

    def list_log_entries(self, log_file_id: str, offset: int, limit: int) -> list[LogEntry]:
        """Return entries of a log file ordered by line number, one page of them."""
        with self._lock:
            items = self._list_log_entries_locked(log_file_id)
        return paginate(items, offset, limit)

    def list_log_entries_filtered(self, filters: LogEntryListFilter) -> Page[LogEntry]:
        """Return one filtered, sorted page of log entries."""
        with self._lock:
            items = [
                self._clone(item)
                for item in self._entries.values()
                if self._entry_matches(item, filters)
            ]
        items.sort(key=self._sort_key(filters.sort), reverse=not ascending(filters.order))
        return paged(items, filters.offset, filters.limit)

    @staticmethod
    def _entry_matches(item: LogEntry, filters: LogEntryListFilter) -> bool:
        if filters.log_file_id and item.log_file_id != filters.log_file_id:
            return False
        if filters.from_line > 0 and item.line_number < filters.from_line:
            return False
        if filters.to_line > 0 and item.line_number > filters.to_line:
            return False
        return matches_search(
            filters.q,
            item.id,
            item.log_file_id,
            item.content,
            item.hash,
            str(item.line_number),
        )

    def _sort_key(self, sort_by: str) -> Callable[[LogEntry], Any]:
        if sort_by == "collected_at":
            return lambda item: self._time_key(item.collected_at)
        return lambda item: (item.line_number, item.id)

    def list_log_entries_by_line_range(
        self, log_file_id: str, from_line: int, to_line: int
    ) -> list[LogEntry]:
        """Return entries whose line numbers lie in the inclusive range."""
        with self._lock:
            items = self._list_log_entries_locked(log_file_id)
        return [item for item in items if from_line <= item.line_number <= to_line]

    def get_max_line_number(self, log_file_id: str) -> int:
        """Return the highest stored line number of a log file, or 0."""
        with self._lock:
            return max([0, *self._entries_by_log_file.get(log_file_id, {})])

    def count_log_entries(self, log_file_id: str) -> int:
        """Return the number of stored entries of a log file."""
        with self._lock:
            return len(self._entries_by_log_file.get(log_file_id, {}))

    def delete_log_entries_by_log_file(self, log_file_id: str) -> None:
        """Remove all entries of a log file."""
        with self._lock:
            for entry_id in self._entry_ids_for_log_file(log_file_id):
                self._entries.pop(entry_id, None)
            self._entries_by_log_file.pop(log_file_id, None)

    def _store_log_entry_locked(self, entry: LogEntry) -> None:
        if not entry.id:
            entry.id = new_id("entry")
        if entry.collected_at is None:
            entry.collected_at = self._now()
        self._entries[entry.id] = self._clone(entry)
        self._entries_by_log_file.setdefault(entry.log_file_id, {})[entry.line_number] = entry.id

    def _validate_log_entry_locked(self, entry: LogEntry) -> None:
        if entry.log_file_id not in self._log_files:
            raise NotFoundError(f'log file "{entry.log_file_id}"')
        if entry.id and entry.id in self._entries:
            raise ConflictError(f'log entry "{entry.id}" already exists')
        existing_id = self._entries_by_log_file.get(entry.log_file_id, {}).get(entry.line_number)
        if existing_id is not None:
            raise ConflictError(
                f'log entry line {entry.line_number} already exists as "{existing_id}"'
            )

    def _list_log_entries_locked(self, log_file_id: str) -> list[LogEntry]:
        items = [
            self._clone(self._entries[entry_id])
            for entry_id in self._entries_by_log_file.get(log_file_id, {}).values()
        ]
        items.sort(key=lambda item: item.line_number)
        return items