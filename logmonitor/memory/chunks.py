"""In-memory storage of aggregate chunk hashes."""

from __future__ import annotations

from collections.abc import Iterable

from logmonitor.errors import ConflictError, NotFoundError
from logmonitor.memory.core import StorageCore, new_id, paginate
from logmonitor.models import LogChunk


class LogChunkStore(StorageCore):
    """Log chunk operations of the in-memory storage."""

    def create_log_chunk(self, chunk: LogChunk) -> None:
        """Store one chunk; fills in its id and creation time when missing."""
        with self._lock:
            self._create_log_chunk_locked(chunk)

    def create_log_chunks(self, chunks: Iterable[LogChunk]) -> None:
        """Validate every chunk against stored data, then store them in order."""
        batch = list(chunks)
        with self._lock:
            for chunk in batch:
                self._validate_log_chunk_locked(chunk)
            for chunk in batch:
                self._create_log_chunk_locked(chunk)

    def list_log_chunks(self, log_file_id: str, offset: int, limit: int) -> list[LogChunk]:
        """Return chunks of a log file ordered by chunk number, one page of them."""
        with self._lock:
            items = self._list_log_chunks_locked(log_file_id)
        return paginate(items, offset, limit)

    def get_latest_log_chunk(self, log_file_id: str) -> LogChunk:
        """Return the chunk with the highest number of a log file."""
        with self._lock:
            items = self._list_log_chunks_locked(log_file_id)
        if not items:
            raise NotFoundError(f'latest log chunk for log file "{log_file_id}"')
        return items[-1]

    def delete_log_chunks_by_log_file(self, log_file_id: str) -> None:
        """Remove all chunks of a log file."""
        with self._lock:
            for chunk_id in self._chunks_by_log_file.pop(log_file_id, []):
                self._chunks.pop(chunk_id, None)

    def _create_log_chunk_locked(self, chunk: LogChunk) -> None:
        self._validate_log_chunk_locked(chunk)
        self._store_log_chunk_locked(chunk)

    def _store_log_chunk_locked(self, chunk: LogChunk) -> None:
        if not chunk.id:
            chunk.id = new_id("chunk")
        if chunk.created_at is None:
            chunk.created_at = self._now()
        self._chunks[chunk.id] = self._clone(chunk)
        self._chunks_by_log_file.setdefault(chunk.log_file_id, []).append(chunk.id)

    def _validate_log_chunk_locked(self, chunk: LogChunk) -> None:
        if chunk.log_file_id not in self._log_files:
            raise NotFoundError(f'log file "{chunk.log_file_id}"')
        if chunk.id and chunk.id in self._chunks:
            raise ConflictError(f'log chunk "{chunk.id}" already exists')
        for chunk_id in self._chunks_by_log_file.get(chunk.log_file_id, []):
            existing = self._chunks.get(chunk_id)
            if existing is not None and existing.chunk_number == chunk.chunk_number:
                raise ConflictError(f"log chunk number {chunk.chunk_number} already exists")

    def _list_log_chunks_locked(self, log_file_id: str) -> list[LogChunk]:
        items = [
            self._clone(self._chunks[chunk_id])
            for chunk_id in self._chunks_by_log_file.get(log_file_id, [])
        ]
        items.sort(key=lambda item: (item.chunk_number, item.id))
        return items