"""Shared state and helpers of the in-memory storage backend."""

from __future__ import annotations

import copy
import secrets
import threading
from collections.abc import Sequence
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeVar

from logmonitor.filters import Page
from logmonitor.models import CheckResult, LogChunk, LogEntry, LogFile, Server

T = TypeVar("T")
M = TypeVar("M")


def new_id(prefix: str) -> str:
    """Return a random identifier of the form ``<prefix>_<16 hex digits>``."""
    return f"{prefix}_{secrets.token_hex(8)}"


def normalize_offset(offset: int) -> int:
    """Clamp a paging offset to zero or more."""
    return max(offset, 0)


def paginate(items: Sequence[T], offset: int, limit: int) -> list[T]:
    """Return a detached slice; a limit of zero or less means everything after offset."""
    offset = normalize_offset(offset)
    if offset >= len(items):
        return []
    if limit <= 0 or offset + limit > len(items):
        limit = len(items) - offset
    return list(items[offset:offset + limit])


def paged(items: Sequence[T], offset: int, limit: int) -> Page[T]:
    """Return one page of items together with the total number of items."""
    return Page(
        items=paginate(items, offset, limit),
        total=len(items),
        offset=normalize_offset(offset),
        limit=limit,
    )


def _search_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Enum):
        value = value.value
    return str(value).strip().lower()


def matches_search(query: str, *args: Any) -> bool:
    """Report whether any value contains the query, ignoring case and outer blanks."""
    needle = _search_text(query)
    if not needle:
        return True
    return any(needle in _search_text(value) for value in args)


def ascending(order: str) -> bool:
    """Report whether an order string asks for ascending order."""
    return order.strip().lower() == "asc"


class StorageCore:
    """Maps and lock shared by all in-memory stores."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._servers: dict[str, Server] = {}
        self._log_files: dict[str, LogFile] = {}
        self._log_files_by_server: dict[str, dict[str, str]] = {}
        self._entries: dict[str, LogEntry] = {}
        self._entries_by_log_file: dict[str, dict[int, str]] = {}
        self._chunks: dict[str, LogChunk] = {}
        self._chunks_by_log_file: dict[str, list[str]] = {}
        self._checks: dict[str, CheckResult] = {}
        self._checks_by_log_file: dict[str, list[str]] = {}

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    @staticmethod
    def _clone(model: M) -> M:
        return copy.deepcopy(model)

    @staticmethod
    def _time_key(value: datetime | None) -> tuple[bool, float]:
        # A missing time sorts before every real one.
        if value is None:
            return (False, 0.0)
        return (True, value.timestamp())

    def _log_file_ids_for_server(self, server_id: str) -> list[str]:
        return list(self._log_files_by_server.get(server_id, {}).values())

    def _entry_ids_for_log_file(self, log_file_id: str) -> list[str]:
        return list(self._entries_by_log_file.get(log_file_id, {}).values())

    def _delete_log_file_locked(self, log_file_id: str) -> None:
        """Remove a log file and everything linked to it; the lock must be held."""
        log_file = self._log_files.get(log_file_id)
        if log_file is None:
            return

        for entry_id in self._entry_ids_for_log_file(log_file_id):
            self._entries.pop(entry_id, None)
        self._entries_by_log_file.pop(log_file_id, None)

        for chunk_id in self._chunks_by_log_file.pop(log_file_id, []):
            self._chunks.pop(chunk_id, None)

        for check_id in self._checks_by_log_file.pop(log_file_id, []):
            self._checks.pop(check_id, None)

        by_path = self._log_files_by_server.get(log_file.server_id)
        if by_path is not None:
            by_path.pop(log_file.path, None)
            if not by_path:
                del self._log_files_by_server[log_file.server_id]

        del self._log_files[log_file_id]