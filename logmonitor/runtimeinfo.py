"""Runtime status that can be exposed to operators."""

from __future__ import annotations

import threading
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EnvCheckStatus(str, Enum):
    """How an environment placeholder was resolved during config loading."""

    PROVIDED = "provided"
    DEFAULTED = "defaulted"
    MISSING = "missing"


@dataclass(frozen=True)
class EnvCheck:
    """One resolved configuration placeholder."""

    name: str
    status: EnvCheckStatus
    message: str = ""


@dataclass(frozen=True)
class StartupWarning:
    """A non-fatal startup problem that was skipped."""

    code: str
    message: str


@dataclass(frozen=True)
class Snapshot:
    """Detached copy of the runtime state."""

    dry_run: bool = False
    storage_backend: str = ""
    scheduler_enabled: bool = False
    warnings: tuple[StartupWarning, ...] = ()
    env_checks: tuple[EnvCheck, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form; empty lists become None."""
        return {
            "dry_run": self.dry_run,
            "storage_backend": self.storage_backend,
            "scheduler_enabled": self.scheduler_enabled,
            "warnings": [
                {"code": w.code, "message": w.message} for w in self.warnings
            ] or None,
            "env_checks": [
                {"name": c.name, "status": EnvCheckStatus(c.status).value, "message": c.message}
                for c in self.env_checks
            ] or None,
        }


@dataclass(frozen=True)
class Check:
    """One readiness probe result."""

    name: str
    ready: bool
    message: str = ""


@dataclass(frozen=True)
class Readiness:
    """The full readiness response."""

    ready: bool
    checks: tuple[Check, ...] = field(default_factory=tuple)


class State:
    """Mutable runtime metadata, safe to share between threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._dry_run = False
        self._storage_backend = ""
        self._scheduler_enabled = False
        self._warnings: list[StartupWarning] = []
        self._env_checks: tuple[EnvCheck, ...] = ()

    def configure(
        self,
        *,
        dry_run: bool | None = None,
        storage_backend: str | None = None,
        scheduler_enabled: bool | None = None,
    ) -> None:
        """Store the given settings; arguments left as None are unchanged."""
        with self._lock:
            if dry_run is not None:
                self._dry_run = dry_run
            if storage_backend is not None:
                self._storage_backend = storage_backend
            if scheduler_enabled is not None:
                self._scheduler_enabled = scheduler_enabled

    def replace_env_checks(self, items: Iterable[EnvCheck]) -> None:
        """Replace the recorded environment checks."""
        checks = tuple(items)
        with self._lock:
            self._env_checks = checks

    def add_warning(self, code: str, message: str) -> None:
        """Append one non-fatal startup warning."""
        with self._lock:
            self._warnings.append(StartupWarning(code=code, message=message))

    def snapshot(self) -> Snapshot:
        """Return a detached snapshot of the current state."""
        with self._lock:
            return Snapshot(
                dry_run=self._dry_run,
                storage_backend=self._storage_backend,
                scheduler_enabled=self._scheduler_enabled,
                warnings=tuple(self._warnings),
                env_checks=self._env_checks,
            )