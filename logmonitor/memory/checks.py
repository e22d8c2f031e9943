"""In-memory storage of integrity check results."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from logmonitor.errors import ConflictError, NotFoundError
from logmonitor.filters import CheckResultListFilter, Page
from logmonitor.memory.core import (
    StorageCore,
    ascending,
    matches_search,
    new_id,
    paged,
    paginate,
)
from logmonitor.models import (
    CheckResult,
    CheckStatus,
    problem_type_for_check_status,
    severity_for_check_status,
)


def _status_text(status: CheckStatus | str | None) -> str:
    if status is None:
        return ""
    if isinstance(status, CheckStatus):
        return status.value
    return str(status)


class CheckResultStore(StorageCore):
    """Check result operations of the in-memory storage."""

    def create_check_result(self, result: CheckResult) -> None:
        """Store a check result; fills in its id and check time when missing."""
        with self._lock:
            if result.log_file_id not in self._log_files:
                raise NotFoundError(f'log file "{result.log_file_id}"')
            if not result.id:
                result.id = new_id("check")
            if result.id in self._checks:
                raise ConflictError(f'check result "{result.id}" already exists')
            if result.checked_at is None:
                result.checked_at = self._now()

            self._checks[result.id] = self._clone(result)
            self._checks_by_log_file.setdefault(result.log_file_id, []).append(result.id)

    def get_check_result_by_id(self, check_id: str) -> CheckResult:
        """Return a copy of the check result with the given id."""
        with self._lock:
            result = self._checks.get(check_id)
            if result is None:
                raise NotFoundError(f'check result "{check_id}"')
            return self._clone(result)

    def list_check_results(self, log_file_id: str, offset: int, limit: int) -> list[CheckResult]:
        """Return the check history of a log file in chronological order."""
        with self._lock:
            items = self._list_check_results_locked(log_file_id)
        return paginate(items, offset, limit)

    def list_check_results_filtered(self, filters: CheckResultListFilter) -> Page[CheckResult]:
        """Return one filtered, sorted page of check results."""
        with self._lock:
            items = [
                self._clone(item)
                for item in self._checks.values()
                if self._check_matches(item, filters)
            ]
        items.sort(key=self._sort_key(filters.sort), reverse=not ascending(filters.order))
        return paged(items, filters.offset, filters.limit)

    @staticmethod
    def _check_matches(item: CheckResult, filters: CheckResultListFilter) -> bool:
        if filters.log_file_id and item.log_file_id != filters.log_file_id:
            return False
        if filters.status and item.status != filters.status:
            return False
        if filters.severity and severity_for_check_status(item.status) != filters.severity:
            return False
        if (
            filters.problem_type
            and problem_type_for_check_status(item.status) != filters.problem_type
        ):
            return False
        return matches_search(
            filters.q, item.id, item.log_file_id, item.error_message, item.status
        )

    def _sort_key(self, sort_by: str) -> Callable[[CheckResult], Any]:
        if sort_by == "status":
            return lambda item: (_status_text(item.status), self._time_key(item.checked_at))
        if sort_by == "tampered_lines":
            return lambda item: (item.tampered_lines, self._time_key(item.checked_at))
        return lambda item: self._time_key(item.checked_at)

    def get_latest_check_result(self, log_file_id: str) -> CheckResult:
        """Return the newest check result of a log file."""
        with self._lock:
            items = self._list_check_results_locked(log_file_id)
        if not items:
            raise NotFoundError(f'latest check result for log file "{log_file_id}"')
        return items[-1]

    def _list_check_results_locked(self, log_file_id: str) -> list[CheckResult]:
        items = [
            self._clone(self._checks[check_id])
            for check_id in self._checks_by_log_file.get(log_file_id, [])
        ]
        items.sort(key=lambda item: self._time_key(item.checked_at))
        return items