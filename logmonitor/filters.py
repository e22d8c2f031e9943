"""Paging, search and filter inputs for list reads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from logmonitor.models import (
    AuthType,
    CheckStatus,
    LogType,
    OSType,
    ProblemSeverity,
    ProblemType,
    ServerManagedBy,
    ServerStatus,
)

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One filtered page of results and the number of all matching rows."""

    items: list[T] = field(default_factory=list)
    total: int = 0
    offset: int = 0
    limit: int = 0


@dataclass
class ListOptions:
    """Common paging, search and ordering inputs."""

    q: str = ""
    offset: int = 0
    limit: int = 0
    sort: str = ""
    order: str = ""


@dataclass
class ServerListFilter(ListOptions):
    """Narrows server list reads."""

    status: ServerStatus | None = None
    os_type: OSType | None = None
    managed_by: ServerManagedBy | None = None
    auth_type: AuthType | None = None


@dataclass
class LogFileListFilter(ListOptions):
    """Narrows log file list reads."""

    server_id: str = ""
    active: bool | None = None
    log_type: LogType | None = None


@dataclass
class LogEntryListFilter(ListOptions):
    """Narrows log entry list reads."""

    log_file_id: str = ""
    from_line: int = 0
    to_line: int = 0


@dataclass
class CheckResultListFilter(ListOptions):
    """Narrows check result history reads."""

    log_file_id: str = ""
    status: CheckStatus | None = None
    severity: ProblemSeverity | None = None
    problem_type: ProblemType | None = None