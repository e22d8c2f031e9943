"""In-memory storage of discovered remote log files."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from logmonitor.errors import ConflictError, NotFoundError
from logmonitor.filters import LogFileListFilter, Page
from logmonitor.memory.core import StorageCore, ascending, matches_search, new_id, paged
from logmonitor.models import LogFile


class LogFileStore(StorageCore):
    """Log file operations of the in-memory storage."""

    def create_log_file(self, log_file: LogFile) -> None:
        """Store a new log file; fills in its id and creation time when missing."""
        with self._lock:
            if log_file.server_id not in self._servers:
                raise NotFoundError(f'server "{log_file.server_id}"')
            if not log_file.id:
                log_file.id = new_id("log")
            if log_file.id in self._log_files:
                raise ConflictError(f'log file "{log_file.id}" already exists')

            by_path = self._log_files_by_server.setdefault(log_file.server_id, {})
            existing_id = by_path.get(log_file.path)
            if existing_id is not None:
                raise ConflictError(
                    f'log file path "{log_file.path}" already exists as "{existing_id}"'
                )

            if log_file.created_at is None:
                log_file.created_at = self._now()

            self._log_files[log_file.id] = self._clone(log_file)
            by_path[log_file.path] = log_file.id

    def get_log_file_by_id(self, log_file_id: str) -> LogFile:
        """Return a copy of the log file with the given id."""
        with self._lock:
            log_file = self._log_files.get(log_file_id)
            if log_file is None:
                raise NotFoundError(f'log file "{log_file_id}"')
            return self._clone(log_file)

    def list_log_files_by_server(self, server_id: str) -> list[LogFile]:
        """Return the log files of a server ordered by path."""
        with self._lock:
            items = [
                self._clone(item)
                for item in self._log_files.values()
                if item.server_id == server_id
            ]
        items.sort(key=lambda item: (item.path, item.id))
        return items

    def list_active_log_files(self) -> list[LogFile]:
        """Return active log files ordered by server and path."""
        with self._lock:
            items = [self._clone(item) for item in self._log_files.values() if item.is_active]
        items.sort(key=lambda item: (item.server_id, item.path))
        return items

    def list_log_files_filtered(self, filters: LogFileListFilter) -> Page[LogFile]:
        """Return one filtered, sorted page of log files."""
        with self._lock:
            items = [
                self._clone(item)
                for item in self._log_files.values()
                if self._log_file_matches(item, filters)
            ]
        items.sort(key=self._sort_key(filters.sort), reverse=not ascending(filters.order))
        return paged(items, filters.offset, filters.limit)

    @staticmethod
    def _log_file_matches(item: LogFile, filters: LogFileListFilter) -> bool:
        if filters.server_id and item.server_id != filters.server_id:
            return False
        if filters.active is not None and item.is_active != filters.active:
            return False
        if filters.log_type and item.log_type != filters.log_type:
            return False
        return matches_search(filters.q, item.id, item.server_id, item.path, item.log_type)

    def _sort_key(self, sort_by: str) -> Callable[[LogFile], Any]:
        if sort_by == "last_scanned":
            return lambda item: self._time_key(item.last_scanned_at)
        if sort_by == "last_line":
            return lambda item: (item.last_line_number, item.path)
        if sort_by == "created":
            return lambda item: self._time_key(item.created_at)
        return lambda item: (item.path, item.id)

    def update_log_file(self, log_file: LogFile) -> None:
        """Overwrite a stored log file; its server cannot change."""
        with self._lock:
            current = self._log_files.get(log_file.id)
            if current is None:
                raise NotFoundError(f'log file "{log_file.id}"')
            if current.server_id != log_file.server_id:
                raise ConflictError(f'log file "{log_file.id}" server id cannot change')

            by_path = self._log_files_by_server.setdefault(log_file.server_id, {})
            if current.path != log_file.path:
                existing_id = by_path.get(log_file.path)
                if existing_id is not None and existing_id != log_file.id:
                    raise ConflictError(
                        f'log file path "{log_file.path}" already exists as "{existing_id}"'
                    )
                by_path.pop(current.path, None)
                by_path[log_file.path] = log_file.id

            self._log_files[log_file.id] = self._clone(log_file)

    def delete_log_file(self, log_file_id: str) -> None:
        """Remove a log file with its entries, chunks and check results."""
        with self._lock:
            if log_file_id not in self._log_files:
                raise NotFoundError(f'log file "{log_file_id}"')
            self._delete_log_file_locked(log_file_id)

    def update_last_scanned(self, log_file_id: str) -> None:
        """Set the last scan time of a log file to now."""
        with self._lock:
            log_file = self._log_files.get(log_file_id)
            if log_file is None:
                raise NotFoundError(f'log file "{log_file_id}"')
            log_file.last_scanned_at = self._now()