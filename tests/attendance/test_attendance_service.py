from __future__ import annotations

from datetime import date

import pytest

from src.coaching_center.coaching_center.attendance.model import AttendanceEntry
from src.coaching_center.coaching_center.core.enums import AttendanceStatus
from src.coaching_center.coaching_center.core.exceptions import (
    BatchNotFoundError,
    InvalidDateError,
    InvalidDateRangeError,
    StoreUnavailableError,
    ValidationError,
)


@pytest.fixture()
def enrolled(container, make_batch, make_student):
    batch = make_batch()
    students = [make_student(), make_student(), make_student()]
    for s in students:
        container.enrollment_service.enroll(s.student_id, batch.batch_id)
    return batch, students


def test_resubmission_overwrites_instead_of_duplicating(container, enrolled):
    batch, (s1, s2, _) = enrolled
    svc = container.attendance_service

    svc.submit_batch_attendance(
        batch.batch_id,
        "2024-03-01",
        [{"student_id": s1.student_id, "status": "present"}, {"student_id": s2.student_id, "status": "absent"}],
    )
    svc.submit_batch_attendance(batch.batch_id, "2024-03-01", [{"student_id": s1.student_id, "status": "absent"}])

    records = svc.get_batch_attendance(batch.batch_id, "2024-03-01")
    assert len(records) == 2
    assert {r.student_id: r.status for r in records} == {
        s1.student_id: AttendanceStatus.ABSENT,
        s2.student_id: AttendanceStatus.ABSENT,
    }


def test_duplicate_key_inside_one_submission_keeps_the_last(container, enrolled):
    batch, (s1, _, _) = enrolled

    result = container.attendance_service.submit_batch_attendance(
        batch.batch_id,
        "2024-03-01",
        [
            AttendanceEntry(student_id=s1.student_id, status=AttendanceStatus.PRESENT),
            AttendanceEntry(student_id=s1.student_id, status=AttendanceStatus.LATE, remarks="bus"),
        ],
        marked_by=42,
    )

    assert result.saved == 2
    records = container.attendance_service.get_batch_attendance(batch.batch_id, "2024-03-01")
    assert [(r.status, r.remarks, r.marked_by) for r in records] == [(AttendanceStatus.LATE, "bus", 42)]


def test_bad_entries_fail_individually(container, enrolled, make_student):
    batch, (s1, _, _) = enrolled
    outsider = make_student()

    result = container.attendance_service.submit_batch_attendance(
        batch.batch_id,
        "2024-03-01",
        [
            {"student_id": s1.student_id, "status": "present"},
            {"student_id": s1.student_id, "status": "sleeping"},
            {"student_id": outsider.student_id, "status": "present"},
            {"status": "present"},
        ],
    )

    assert result.saved == 1
    assert [o.ok for o in result.outcomes] == [True, False, False, False]
    assert "status must be one of" in result.outcomes[1].error
    assert "not enrolled" in result.outcomes[2].error
    assert result.outcomes[3].student_id is None
    assert result.to_dict()["failed"] == 3


def test_store_failure_is_reported_per_record(container, enrolled, monkeypatch):
    batch, (s1, s2, _) = enrolled
    real_upsert = container.attendance_repo.upsert

    def flaky_upsert(**kwargs):
        if kwargs["student_id"] == s1.student_id:
            raise StoreUnavailableError("Database operation failed")
        return real_upsert(**kwargs)

    monkeypatch.setattr(container.attendance_repo, "upsert", flaky_upsert)

    result = container.attendance_service.submit_batch_attendance(
        batch.batch_id,
        "2024-03-01",
        [{"student_id": s1.student_id, "status": "present"}, {"student_id": s2.student_id, "status": "present"}],
    )

    assert [o.ok for o in result.outcomes] == [False, True]
    assert "Database" not in result.outcomes[0].error


@pytest.mark.parametrize("bad_date", ["2024-3-1", "01/03/2024", "2024-02-30", "", None])
def test_submission_rejects_malformed_date(container, enrolled, bad_date):
    batch, (s1, _, _) = enrolled

    with pytest.raises(InvalidDateError):
        container.attendance_service.submit_batch_attendance(
            batch.batch_id, bad_date, [{"student_id": s1.student_id, "status": "present"}]
        )


def test_submission_request_level_checks(container, enrolled):
    batch, (s1, _, _) = enrolled
    svc = container.attendance_service

    with pytest.raises(BatchNotFoundError):
        svc.submit_batch_attendance(999, "2024-03-01", [{"student_id": s1.student_id, "status": "present"}])
    with pytest.raises(ValidationError):
        svc.submit_batch_attendance(batch.batch_id, "2024-03-01", [])


def test_submission_over_the_cap_is_rejected_not_truncated(container, enrolled):
    batch, (s1, _, _) = enrolled
    records = [{"student_id": s1.student_id, "status": "present"}] * 51

    with pytest.raises(ValidationError):
        container.attendance_service.submit_batch_attendance(batch.batch_id, "2024-03-01", records)

    assert container.attendance_service.get_batch_attendance(batch.batch_id, "2024-03-01") == []


def test_get_batch_attendance_empty_day(container, enrolled):
    batch, _ = enrolled
    assert container.attendance_service.get_batch_attendance(batch.batch_id, "2024-03-02") == []


def test_attendance_sheet_defaults_to_absent(container, enrolled):
    batch, (s1, s2, s3) = enrolled
    container.attendance_service.submit_batch_attendance(
        batch.batch_id, "2024-03-01", [{"student_id": s2.student_id, "status": "late", "remarks": "traffic"}]
    )

    sheet = container.attendance_service.get_attendance_sheet(batch.batch_id, "2024-03-01")

    assert [(r.student_id, r.status, r.recorded) for r in sheet] == [
        (s1.student_id, AttendanceStatus.ABSENT, False),
        (s2.student_id, AttendanceStatus.LATE, True),
        (s3.student_id, AttendanceStatus.ABSENT, False),
    ]
    assert sheet[1].remarks == "traffic"
    assert sheet[0].student_name == s1.name


def test_batch_history_groups_by_day(container, enrolled):
    batch, (s1, s2, _) = enrolled
    svc = container.attendance_service
    svc.submit_batch_attendance(
        batch.batch_id,
        "2024-03-01",
        [{"student_id": s1.student_id, "status": "present"}, {"student_id": s2.student_id, "status": "absent"}],
    )
    svc.submit_batch_attendance(batch.batch_id, "2024-03-04", [{"student_id": s1.student_id, "status": "present"}])

    history = svc.get_batch_history(batch.batch_id, "2024-03-01", "2024-03-31")

    assert [d.day for d in history] == [date(2024, 3, 1), date(2024, 3, 4)]
    assert history[0].stats.summary.attendance_percentage == 50
    assert history[1].stats.summary.attendance_percentage == 100

    with pytest.raises(InvalidDateRangeError):
        svc.get_batch_history(batch.batch_id, "2024-03-31", "2024-03-01")


def test_student_attendance_report(container, enrolled):
    batch, (s1, _, _) = enrolled
    svc = container.attendance_service
    for day, status in (("2024-03-01", "present"), ("2024-03-04", "present"), ("2024-03-06", "absent")):
        svc.submit_batch_attendance(batch.batch_id, day, [{"student_id": s1.student_id, "status": status}])

    report = svc.get_student_attendance(s1.student_id, batch.batch_id)

    assert [r.attendance_date for r in report.records] == [date(2024, 3, 6), date(2024, 3, 4), date(2024, 3, 1)]
    assert report.stats.summary.attendance_percentage == 67

    windowed = svc.get_student_attendance(s1.student_id, batch.batch_id, start="2024-03-02", end="2024-03-05")
    assert windowed.stats.summary.total == 1
