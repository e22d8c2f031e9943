"""In-memory storage of monitored server definitions."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

from logmonitor.errors import ConflictError, NotFoundError
from logmonitor.filters import Page, ServerListFilter
from logmonitor.memory.core import StorageCore, ascending, matches_search, new_id, paged
from logmonitor.models import Server, ServerManagedBy, ServerStatus

_STATUS_RANK = {
    ServerStatus.ACTIVE: 1,
    ServerStatus.INACTIVE: 2,
    ServerStatus.DEGRADED: 3,
    ServerStatus.ERROR: 4,
}


def _status_rank(status: ServerStatus | str | None) -> int:
    if status is None:
        return 0
    try:
        return _STATUS_RANK.get(ServerStatus(status), 0)
    except ValueError:
        return 0


class ServerStore(StorageCore):
    """Server operations of the in-memory storage."""

    def create_server(self, server: Server) -> None:
        """Store a new server; fills in id, timestamps, status and owner when missing."""
        with self._lock:
            if not server.id:
                server.id = new_id("srv")
            if server.id in self._servers:
                raise ConflictError(f'server "{server.id}" already exists')
            if self._find_by_name_or_host_locked(server.name, server.host, "") is not None:
                raise ConflictError("server name or host already exists")

            now = self._now()
            if server.created_at is None:
                server.created_at = now
            if server.updated_at is None:
                server.updated_at = server.created_at
            if not server.status:
                server.status = ServerStatus.INACTIVE
            if not server.managed_by:
                server.managed_by = ServerManagedBy.API

            self._servers[server.id] = self._clone(server)

    def get_server_by_id(self, server_id: str) -> Server:
        """Return a copy of the server with the given id."""
        with self._lock:
            server = self._servers.get(server_id)
            if server is None:
                raise NotFoundError(f'server "{server_id}"')
            return self._clone(server)

    def list_servers(self) -> list[Server]:
        """Return all servers ordered by name."""
        with self._lock:
            items = [self._clone(item) for item in self._servers.values()]
        items.sort(key=lambda item: (item.name, item.id))
        return items

    def list_servers_filtered(self, filters: ServerListFilter) -> Page[Server]:
        """Return one filtered, sorted page of servers."""
        with self._lock:
            items = [
                self._clone(item)
                for item in self._servers.values()
                if self._server_matches(item, filters)
            ]
        items.sort(key=self._sort_key(filters.sort), reverse=not ascending(filters.order))
        return paged(items, filters.offset, filters.limit)

    @staticmethod
    def _server_matches(item: Server, filters: ServerListFilter) -> bool:
        if filters.status and item.status != filters.status:
            return False
        if filters.os_type and item.os_type != filters.os_type:
            return False
        if filters.managed_by and item.managed_by != filters.managed_by:
            return False
        if filters.auth_type and item.auth_type != filters.auth_type:
            return False
        return matches_search(
            filters.q, item.id, item.name, item.host, item.username, item.last_error
        )

    def _sort_key(self, sort_by: str) -> Callable[[Server], Any]:
        if sort_by == "status":
            return lambda item: (_status_rank(item.status), item.name)
        if sort_by == "last_seen":
            return lambda item: self._time_key(item.last_seen_at)
        if sort_by == "failures":
            return lambda item: (item.failure_count, item.name)
        return lambda item: (item.name, item.id)

    def update_server(self, server: Server) -> None:
        """Overwrite a stored server and refresh its update time."""
        with self._lock:
            if server.id not in self._servers:
                raise NotFoundError(f'server "{server.id}"')
            if self._find_by_name_or_host_locked(server.name, server.host, server.id) is not None:
                raise ConflictError("server name or host already exists")

            stored = self._clone(server)
            if not stored.managed_by:
                stored.managed_by = ServerManagedBy.API
            stored.updated_at = self._now()
            self._servers[server.id] = stored

    def _find_by_name_or_host_locked(self, name: str, host: str, exclude_id: str) -> Server | None:
        name_key = name.casefold()
        host_key = host.casefold()
        for item in self._servers.values():
            if item.id == exclude_id:
                continue
            if item.name.casefold() == name_key or item.host.casefold() == host_key:
                return item
        return None

    def delete_server(self, server_id: str) -> None:
        """Remove a server with its log files and everything linked to them."""
        with self._lock:
            if server_id not in self._servers:
                raise NotFoundError(f'server "{server_id}"')
            for log_file_id in self._log_file_ids_for_server(server_id):
                self._delete_log_file_locked(log_file_id)
            del self._servers[server_id]
            self._log_files_by_server.pop(server_id, None)

    def _get_locked(self, server_id: str) -> Server:
        server = self._servers.get(server_id)
        if server is None:
            raise NotFoundError(f'server "{server_id}"')
        return server

    def update_server_status(self, server_id: str, status: ServerStatus) -> None:
        """Change only the status of a server."""
        with self._lock:
            server = self._get_locked(server_id)
            server.status = status
            server.updated_at = self._now()

    def record_server_success(self, server_id: str, seen_at: datetime) -> None:
        """Record a successful remote operation and clear the failure state."""
        with self._lock:
            server = self._get_locked(server_id)
            server.status = ServerStatus.ACTIVE
            server.success_count += 1
            server.failure_count = 0
            server.last_error = ""
            server.last_seen_at = seen_at
            server.backoff_until = None
            server.updated_at = self._now()

    def record_server_failure(
        self, server_id: str, last_error: str, backoff_until: datetime | None
    ) -> None:
        """Record a failed remote operation and its backoff deadline."""
        with self._lock:
            server = self._get_locked(server_id)
            server.status = ServerStatus.ERROR
            server.failure_count += 1
            server.last_error = last_error
            server.backoff_until = backoff_until
            server.updated_at = self._now()