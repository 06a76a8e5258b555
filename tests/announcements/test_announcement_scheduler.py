from __future__ import annotations

from datetime import datetime, time

import pytest

from src.coaching_center.coaching_center.announcements.scheduler import derive_announcement_status, normalize_window
from src.coaching_center.coaching_center.core.enums import AnnouncementStatus
from src.coaching_center.coaching_center.core.exceptions import InvalidDateRangeError

START = datetime(2024, 5, 10, 9, 0)
END = datetime(2024, 5, 12, 18, 0)


@pytest.mark.parametrize(
    "now, expected",
    [
        (datetime(2024, 5, 10, 8, 59), AnnouncementStatus.SCHEDULED),
        (START, AnnouncementStatus.ACTIVE),
        (datetime(2024, 5, 11, 12, 0), AnnouncementStatus.ACTIVE),
        (END, AnnouncementStatus.ACTIVE),
        (datetime(2024, 5, 12, 18, 0, 1), AnnouncementStatus.EXPIRED),
    ],
)
def test_status_follows_the_window(now, expected):
    assert derive_announcement_status(now, START, END) == expected


def test_ordinary_window_is_kept():
    assert normalize_window(START, END) == (START, END)


def test_same_day_window_with_end_before_start_spans_the_day():
    start, end = normalize_window(datetime(2024, 5, 10, 15, 0), datetime(2024, 5, 10, 9, 0))

    assert start == datetime(2024, 5, 10, 0, 0)
    assert end == datetime.combine(start.date(), time.max)


def test_same_midnight_timestamps_span_the_day():
    midnight = datetime(2024, 5, 10)

    start, end = normalize_window(midnight, midnight)

    assert derive_announcement_status(datetime(2024, 5, 10, 23, 30), start, end) == AnnouncementStatus.ACTIVE


def test_same_day_forward_window_is_not_widened():
    start, end = normalize_window(datetime(2024, 5, 10, 9, 0), datetime(2024, 5, 10, 11, 0))

    assert (start.hour, end.hour) == (9, 11)


def test_end_before_start_on_different_days_is_rejected():
    with pytest.raises(InvalidDateRangeError):
        normalize_window(datetime(2024, 5, 11, 9, 0), datetime(2024, 5, 10, 23, 0))
