from __future__ import annotations

from datetime import date

import pytest

from src.coaching_center.coaching_center.attendance.model import AttendanceRecord
from src.coaching_center.coaching_center.attendance.stats import (
    batch_day_stats,
    batch_student_breakdown,
    percentage,
    student_batch_stats,
    summarize,
)
from src.coaching_center.coaching_center.core.enums import AttendanceStatus

P, A, L = AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.LATE


def rec(student_id, day, status, batch_id=1):
    return AttendanceRecord(
        attendance_id=0, student_id=student_id, batch_id=batch_id, attendance_date=day, status=status
    )


@pytest.mark.parametrize(
    "part, total, expected",
    [(2, 3, 67), (1, 3, 33), (1, 2, 50), (1, 8, 13), (3, 8, 38), (0, 5, 0), (5, 5, 100), (0, 0, 0), (3, 0, 0)],
)
def test_percentage_rounds_half_up(part, total, expected):
    assert percentage(part, total) == expected


def test_two_present_one_absent_is_67_percent():
    records = [rec(1, date(2024, 1, 1), P), rec(1, date(2024, 1, 2), P), rec(1, date(2024, 1, 3), A)]

    stats = student_batch_stats(1, 1, records)

    assert stats.summary.attendance_percentage == 67
    assert stats.summary.absent_percentage == 33


def test_no_records_is_zero_not_an_error():
    stats = student_batch_stats(1, 1, [])

    assert stats.summary.total == 0
    assert stats.summary.attendance_percentage == 0
    assert stats.monthly == ()


def test_late_is_not_counted_as_present():
    summary = summarize([rec(1, date(2024, 1, 1), P), rec(1, date(2024, 1, 2), L)])

    assert (summary.present, summary.late) == (1, 1)
    assert summary.attendance_percentage == 50
    assert summary.late_percentage == 50


def test_monthly_breakdown_is_ordered_by_month():
    records = [
        rec(1, date(2024, 2, 5), A),
        rec(1, date(2024, 1, 10), P),
        rec(1, date(2024, 1, 11), P),
        rec(1, date(2024, 2, 6), P),
    ]

    stats = student_batch_stats(1, 1, records)

    assert [m for m, _ in stats.monthly] == ["2024-01", "2024-02"]
    assert stats.monthly[0][1].attendance_percentage == 100
    assert stats.monthly[1][1].attendance_percentage == 50
    assert stats.to_dict()["monthly"][1]["month"] == "2024-02"


def test_student_stats_ignore_other_students_and_batches():
    records = [rec(1, date(2024, 1, 1), P), rec(2, date(2024, 1, 1), A), rec(1, date(2024, 1, 1), A, batch_id=2)]

    assert student_batch_stats(1, 1, records).summary.total == 1


def test_batch_day_stats():
    day = date(2024, 3, 1)
    records = [rec(1, day, P), rec(2, day, P), rec(3, day, A), rec(1, date(2024, 3, 2), A)]

    stats = batch_day_stats(1, day, records)

    assert stats.summary.total == 3
    assert stats.summary.attendance_percentage == 67


def test_batch_student_breakdown_orders_by_student():
    day = date(2024, 3, 1)
    records = [rec(2, day, A), rec(1, day, P), rec(2, date(2024, 3, 2), P)]

    breakdown = batch_student_breakdown(1, records)

    assert [s.student_id for s in breakdown] == [1, 2]
    assert breakdown[1].summary.attendance_percentage == 50
