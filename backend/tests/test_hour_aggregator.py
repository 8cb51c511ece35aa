# ruff: noqa

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from app.services.hour_aggregator import summarize_employees, summarize_project, variance_percentage


@dataclass
class _Row:
    employee_id: UUID
    expected_hours: object
    actual_hours: object
    status: str = "pending"
    employee_name: str | None = None
    employee_email: str | None = None


def _row(expected, actual, *, employee_id=None, status="pending", name=None) -> _Row:
    return _Row(
        employee_id=employee_id or uuid4(),
        expected_hours=expected,
        actual_hours=actual,
        status=status,
        employee_name=name,
    )


def test_website_redesign_scenario_balances_out():
    summary = summarize_project([_row(Decimal("10"), Decimal("12")), _row(Decimal("5"), Decimal("3"))])
    assert summary.total_tasks == 2
    assert summary.total_expected_hours == Decimal("15")
    assert summary.total_actual_hours == Decimal("15")
    assert summary.variance == Decimal("0")
    assert summary.variance_percentage == Decimal("0")


@pytest.mark.parametrize(
    "pairs",
    [
        [("8", "10")],
        [("0.1", "0.2"), ("0.2", "0.1"), ("0.3", "0.3")],
        [("12.50", "7.25"), ("3", "0"), ("0", "4.75")],
    ],
)
def test_variance_matches_sums(pairs):
    rows = [_row(Decimal(e), Decimal(a)) for e, a in pairs]
    summary = summarize_project(rows)
    expected = sum((Decimal(e) for e, _ in pairs), Decimal("0"))
    actual = sum((Decimal(a) for _, a in pairs), Decimal("0"))
    assert summary.variance == actual - expected
    assert summary.variance_percentage == (actual - expected) / expected * 100


def test_decimal_sums_do_not_drift():
    summary = summarize_project([_row("0.1", "0.1") for _ in range(10)])
    assert summary.total_expected_hours == Decimal("1.0")
    assert summary.total_actual_hours == Decimal("1.0")


def test_zero_expected_hours_reports_zero_percentage():
    summary = summarize_project([_row(Decimal("0"), Decimal("6"))])
    assert summary.variance == Decimal("6")
    assert summary.variance_percentage == Decimal("0")


def test_empty_task_list():
    summary = summarize_project([])
    assert summary.total_tasks == 0
    assert summary.variance == Decimal("0")
    assert summary.variance_percentage == Decimal("0")


def test_variance_percentage_over_budget():
    assert variance_percentage(Decimal("8"), Decimal("10")) == Decimal("25")


def test_summarize_employees_groups_hours_and_statuses():
    erin = uuid4()
    omar = uuid4()
    rows = [
        _row(Decimal("4"), Decimal("5"), employee_id=erin, status="approved", name="Erin"),
        _row(Decimal("2"), Decimal("1"), employee_id=erin, status="pending"),
        _row(Decimal("3"), Decimal("3"), employee_id=erin, status="rejected"),
        _row(Decimal("1"), Decimal("2"), employee_id=omar, status="pending", name="Omar"),
    ]
    summaries = summarize_employees(rows)

    assert set(summaries) == {erin, omar}
    erin_summary = summaries[erin]
    assert erin_summary.employee_name == "Erin"
    assert erin_summary.total_tasks == 3
    assert erin_summary.total_expected_hours == Decimal("9")
    assert erin_summary.total_actual_hours == Decimal("9")
    assert (erin_summary.pending_tasks, erin_summary.approved_tasks, erin_summary.rejected_tasks) == (1, 1, 1)
    assert summaries[omar].pending_tasks == 1


def test_order_does_not_change_output():
    rows = [_row(Decimal(str(i)), Decimal(str(i * 2))) for i in range(1, 6)]
    assert summarize_project(rows) == summarize_project(list(reversed(rows)))
