"""Domain models shared by the storage layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ServerStatus(str, Enum):
    """Health state of a monitored server."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    DEGRADED = "degraded"
    ERROR = "error"


class ServerManagedBy(str, Enum):
    """Which component owns a server definition."""

    API = "api"
    CONFIG = "config"


class AuthType(str, Enum):
    """How the monitor authenticates against a server."""

    PASSWORD = "password"
    KEY = "key"


class OSType(str, Enum):
    """Operating system family of a server."""

    LINUX = "linux"
    WINDOWS = "windows"


class LogType(str, Enum):
    """Kind of log a discovered file holds."""

    AUTH = "auth"
    SYSLOG = "syslog"
    APP = "app"
    UNKNOWN = "unknown"


class CheckStatus(str, Enum):
    """Outcome of an integrity check."""

    OK = "ok"
    TAMPERED = "tampered"
    ERROR = "error"


class ProblemSeverity(str, Enum):
    """Severity of a problem reported by a check."""

    CRITICAL = "critical"
    ERROR = "error"


class ProblemType(str, Enum):
    """Category of a problem reported by a check."""

    INTEGRITY_TAMPERED = "integrity_tampered"
    INTEGRITY_CHECK_ERROR = "integrity_check_error"


_SEVERITY_BY_STATUS = {
    CheckStatus.TAMPERED: ProblemSeverity.CRITICAL,
    CheckStatus.ERROR: ProblemSeverity.ERROR,
}

_PROBLEM_TYPE_BY_STATUS = {
    CheckStatus.TAMPERED: ProblemType.INTEGRITY_TAMPERED,
    CheckStatus.ERROR: ProblemType.INTEGRITY_CHECK_ERROR,
}


def severity_for_check_status(status: CheckStatus | str | None) -> ProblemSeverity | None:
    """Return the problem severity a check status implies, or None for no problem."""
    if status is None:
        return None
    try:
        return _SEVERITY_BY_STATUS.get(CheckStatus(status))
    except ValueError:
        return None


def problem_type_for_check_status(status: CheckStatus | str | None) -> ProblemType | None:
    """Return the problem type a check status implies, or None for no problem."""
    if status is None:
        return None
    try:
        return _PROBLEM_TYPE_BY_STATUS.get(CheckStatus(status))
    except ValueError:
        return None


@dataclass
class FileIdentity:
    """Identity of a remote file used to detect rotation."""

    device_id: str = ""
    inode: str = ""
    size_bytes: int = 0


@dataclass
class Server:
    """A monitored remote server."""

    id: str = ""
    name: str = ""
    host: str = ""
    port: int = 0
    username: str = ""
    auth_type: AuthType | None = None
    auth_value: str = ""
    os_type: OSType | None = None
    status: ServerStatus | None = None
    managed_by: ServerManagedBy | None = None
    success_count: int = 0
    failure_count: int = 0
    last_error: str = ""
    last_seen_at: datetime | None = None
    backoff_until: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class LogFile:
    """A log file discovered on a server."""

    id: str = ""
    server_id: str = ""
    path: str = ""
    log_type: LogType | None = None
    file_identity: FileIdentity = field(default_factory=FileIdentity)
    meta: dict[str, str] | None = None
    last_scanned_at: datetime | None = None
    last_line_number: int = 0
    last_byte_offset: int = 0
    is_active: bool = False
    created_at: datetime | None = None


@dataclass
class LogEntry:
    """One hashed line of a log file."""

    id: str = ""
    log_file_id: str = ""
    line_number: int = 0
    content: str = ""
    hash: str = ""
    collected_at: datetime | None = None


@dataclass
class LogChunk:
    """An aggregate hash over a run of log lines."""

    id: str = ""
    log_file_id: str = ""
    chunk_number: int = 0
    from_line_number: int = 0
    to_line_number: int = 0
    from_byte_offset: int = 0
    to_byte_offset: int = 0
    entries_count: int = 0
    hash: str = ""
    hash_algorithm: str = ""
    created_at: datetime | None = None


@dataclass
class CheckResult:
    """The outcome of one integrity check of a log file."""

    id: str = ""
    log_file_id: str = ""
    checked_at: datetime | None = None
    status: CheckStatus | None = None
    total_lines: int = 0
    tampered_lines: int = 0
    error_message: str = ""