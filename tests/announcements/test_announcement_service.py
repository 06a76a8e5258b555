from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from src.coaching_center.coaching_center.core.enums import AnnouncementStatus, Priority, TargetAudience
from src.coaching_center.coaching_center.core.exceptions import (
    AnnouncementNotFoundError,
    InvalidDateRangeError,
    ValidationError,
)


@pytest.fixture()
def publish(container, fixed_now):
    def _publish(**overrides):
        data = {
            "title": "Exam week",
            "content": "Mock tests on all batches",
            "type": "Exam",
            "priority": "High",
            "target_audience": "Students",
            "start_at": "2024-01-14T09:00:00",
            "end_at": "2024-01-20T18:00:00",
        }
        data.update(overrides)
        return container.announcement_service.create_announcement(data, created_by=1, now=fixed_now)

    return _publish


def test_create_derives_status_and_keeps_creator(publish):
    announcement = publish()

    assert announcement.status == AnnouncementStatus.ACTIVE
    assert announcement.priority == Priority.HIGH
    assert announcement.created_by == 1


def test_create_rejects_client_status_and_bad_windows(publish):
    with pytest.raises(ValidationError):
        publish(status="active")
    with pytest.raises(InvalidDateRangeError):
        publish(start_at="2024-01-20T09:00:00", end_at="2024-01-14T09:00:00")
    with pytest.raises(ValidationError):
        publish(start_at="next tuesday")


def test_create_same_day_dates_cover_the_whole_day(publish):
    announcement = publish(start_at="2024-01-15", end_at="2024-01-15")

    assert announcement.start_at == datetime(2024, 1, 15, 0, 0)
    assert announcement.end_at.date() == announcement.start_at.date()
    assert announcement.status == AnnouncementStatus.ACTIVE


def test_get_recomputes_status(container, publish):
    announcement = publish()

    later = container.announcement_service.get_announcement(
        announcement.announcement_id, now=datetime(2024, 2, 1)
    )

    assert later.status == AnnouncementStatus.EXPIRED
    assert container.announcements_repo.get_by_id(announcement.announcement_id).status == AnnouncementStatus.EXPIRED


def test_list_for_audience_includes_everyone_announcements(container, publish, fixed_now):
    publish(title="For students")
    publish(title="For all", target_audience="All")
    publish(title="For teachers", target_audience="Teachers")

    titles = {a.title for a in container.announcement_service.list_announcements(audience="Students", now=fixed_now)}

    assert titles == {"For students", "For all"}


def test_list_by_status(container, publish, fixed_now):
    publish(title="Now")
    publish(title="Later", start_at="2024-02-01T09:00:00", end_at="2024-02-02T09:00:00")

    scheduled = container.announcement_service.list_announcements(status="scheduled", now=fixed_now)

    assert [a.title for a in scheduled] == ["Later"]


def test_update_keeps_unchanged_fields(container, publish, fixed_now):
    announcement = publish()

    updated = container.announcement_service.update_announcement(
        announcement.announcement_id,
        {"target_audience": TargetAudience.ALL.value, "end_at": "2024-01-14T10:00:00"},
        now=fixed_now,
    )

    assert updated.title == "Exam week"
    assert updated.target_audience == TargetAudience.ALL
    assert updated.status == AnnouncementStatus.EXPIRED


def test_refresh_and_delete(container, publish):
    announcement = publish()

    assert container.announcement_service.refresh_statuses(now=datetime(2024, 3, 1)) == [announcement.announcement_id]
    assert container.announcement_service.refresh_statuses(now=datetime(2024, 3, 1)) == []

    container.announcement_service.delete_announcement(announcement.announcement_id)
    with pytest.raises(AnnouncementNotFoundError):
        container.announcement_service.get_announcement(announcement.announcement_id)


def _local(value: datetime) -> datetime:
    return value.astimezone().replace(tzinfo=None)


def test_create_accepts_utc_timestamps_from_browsers(publish):
    announcement = publish(start_at="2024-01-14T09:00:00.000Z", end_at="2024-01-20T18:00:00.000Z")

    assert announcement.start_at == _local(datetime(2024, 1, 14, 9, 0, tzinfo=timezone.utc))
    assert announcement.end_at == _local(datetime(2024, 1, 20, 18, 0, tzinfo=timezone.utc))
    assert announcement.start_at.tzinfo is None
    assert announcement.status == AnnouncementStatus.ACTIVE


def test_create_accepts_mixed_offset_and_naive_window(publish):
    ist = timezone(timedelta(hours=5, minutes=30))

    announcement = publish(start_at="2024-01-14T09:00:00+05:30", end_at="2024-01-20T18:00:00")

    assert announcement.start_at == _local(datetime(2024, 1, 14, 9, 0, tzinfo=ist))
    assert announcement.end_at == datetime(2024, 1, 20, 18, 0)
    assert announcement.status == AnnouncementStatus.ACTIVE


def test_update_and_list_accept_aware_now(container, publish):
    announcement = publish()
    aware_now = datetime(2024, 1, 25, 12, 0).astimezone()

    updated = container.announcement_service.update_announcement(
        announcement.announcement_id, {"end_at": "2024-01-21T00:00:00Z"}, now=aware_now
    )

    assert updated.status == AnnouncementStatus.EXPIRED
    assert [a.announcement_id for a in container.announcement_service.list_announcements(now=aware_now)] == [
        announcement.announcement_id
    ]
