from datetime import datetime, timedelta, timezone

import pytest

from logmonitor.errors import ConflictError, NotFoundError
from logmonitor.filters import CheckResultListFilter
from logmonitor.memory.checks import CheckResultStore
from logmonitor.memory.logfiles import LogFileStore
from logmonitor.memory.servers import ServerStore
from logmonitor.models import (
    CheckResult,
    CheckStatus,
    LogFile,
    LogType,
    ProblemSeverity,
    ProblemType,
    Server,
)

BASE_TIME = datetime(2026, 4, 22, 12, 0, 0, tzinfo=timezone.utc)


class _Store(CheckResultStore, LogFileStore, ServerStore):
    pass


@pytest.fixture
def store():
    result = _Store()
    result.create_server(Server(id="srv-it-checks", name="checks-flow", host="192.0.2.40"))
    result.create_log_file(
        LogFile(id="log-it-checks", server_id="srv-it-checks", path="/var/log/checks.log",
                log_type=LogType.APP, is_active=True)
    )
    return result


def _ordered_results():
    return [
        CheckResult(id="check-it-order-2", log_file_id="log-it-checks",
                    checked_at=BASE_TIME + timedelta(minutes=2), status=CheckStatus.TAMPERED,
                    total_lines=10, tampered_lines=1),
        CheckResult(id="check-it-order-1", log_file_id="log-it-checks",
                    checked_at=BASE_TIME + timedelta(minutes=1), status=CheckStatus.OK,
                    total_lines=10),
        CheckResult(id="check-it-order-3", log_file_id="log-it-checks",
                    checked_at=BASE_TIME + timedelta(minutes=3), status=CheckStatus.ERROR,
                    total_lines=0, error_message="read failed"),
    ]


@pytest.fixture
def populated(store):
    for result in _ordered_results():
        store.create_check_result(result)
    return store


def test_latest_missing_before_checks(store):
    with pytest.raises(NotFoundError):
        store.get_latest_check_result("log-it-checks")


def test_history_is_chronological(populated):
    page = populated.list_check_results("log-it-checks", 1, 2)
    assert [r.id for r in page] == ["check-it-order-2", "check-it-order-3"]


def test_latest_check_result(populated):
    latest = populated.get_latest_check_result("log-it-checks")
    assert latest.id == "check-it-order-3"
    assert latest.status == CheckStatus.ERROR
    assert latest.error_message == "read failed"


def test_create_requires_log_file(store):
    with pytest.raises(NotFoundError):
        store.create_check_result(CheckResult(log_file_id="log-missing", status=CheckStatus.OK))


def test_create_fills_id_and_time(store):
    result = CheckResult(log_file_id="log-it-checks", status=CheckStatus.OK)
    store.create_check_result(result)
    assert result.id.startswith("check_")
    assert result.checked_at is not None
    assert store.get_check_result_by_id(result.id) == result


def test_duplicate_id_conflicts(populated):
    with pytest.raises(ConflictError):
        populated.create_check_result(
            CheckResult(id="check-it-order-1", log_file_id="log-it-checks", status=CheckStatus.OK)
        )


def test_get_missing_raises(store):
    with pytest.raises(NotFoundError):
        store.get_check_result_by_id("check-missing")


def test_filtered_by_severity_and_problem_type(populated):
    critical = populated.list_check_results_filtered(
        CheckResultListFilter(severity=ProblemSeverity.CRITICAL)
    )
    assert [r.id for r in critical.items] == ["check-it-order-2"]

    errors = populated.list_check_results_filtered(
        CheckResultListFilter(problem_type=ProblemType.INTEGRITY_CHECK_ERROR)
    )
    assert [r.id for r in errors.items] == ["check-it-order-3"]


def test_filtered_default_order_is_newest_first(populated):
    page = populated.list_check_results_filtered(
        CheckResultListFilter(log_file_id="log-it-checks")
    )
    assert [r.id for r in page.items] == [
        "check-it-order-3", "check-it-order-2", "check-it-order-1",
    ]
    assert page.total == 3


def test_filtered_sort_tampered_lines_asc(populated):
    page = populated.list_check_results_filtered(
        CheckResultListFilter(sort="tampered_lines", order="asc")
    )
    assert page.items[-1].id == "check-it-order-2"
    assert [r.tampered_lines for r in page.items] == sorted(r.tampered_lines for r in page.items)


def test_filtered_search_and_paging(populated):
    page = populated.list_check_results_filtered(CheckResultListFilter(q="READ FAILED"))
    assert [r.id for r in page.items] == ["check-it-order-3"]

    paged = populated.list_check_results_filtered(
        CheckResultListFilter(order="asc", offset=1, limit=1)
    )
    assert [r.id for r in paged.items] == ["check-it-order-2"]
    assert paged.total == 3


def test_deleting_log_file_removes_checks(populated):
    populated.delete_log_file("log-it-checks")
    with pytest.raises(NotFoundError):
        populated.get_check_result_by_id("check-it-order-1")
    assert populated.list_check_results("log-it-checks", 0, 0) == []


def test_returned_results_are_detached(populated):
    latest = populated.get_latest_check_result("log-it-checks")
    latest.error_message = "changed"
    assert populated.get_check_result_by_id("check-it-order-3").error_message == "read failed"