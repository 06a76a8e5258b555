from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

import structlog

from ..common.datetime_utils import now_local, parse_datetime, to_local_naive
from ..common.validators import require_enum, require_non_empty, require_positive_int
from ..core.enums import AnnouncementStatus, AnnouncementType, Priority, TargetAudience
from ..core.exceptions import AnnouncementNotFoundError, ValidationError
from .model import Announcement
from .repository import AnnouncementRepository
from .scheduler import derive_announcement_status, normalize_window

logger = structlog.get_logger(__name__)


def _resolve_now(now: datetime | None) -> datetime:
    return to_local_naive(now) if now is not None else now_local()


class AnnouncementService:
    """Use case: publish announcements and keep their window status current."""

    def __init__(self, announcements: AnnouncementRepository):
        self._announcements = announcements

    def _clean(self, data: Mapping[str, Any], *, current: Optional[Announcement] = None) -> dict:
        if "status" in data:
            raise ValidationError("status is derived from the announcement window and cannot be set")

        def pick(key: str, default=None):
            if key in data:
                return data[key]
            return getattr(current, key) if current is not None else default

        start_at, end_at = normalize_window(
            parse_datetime(pick("start_at"), "start_at"),
            parse_datetime(pick("end_at"), "end_at"),
        )
        return {
            "title": require_non_empty(pick("title"), "title"),
            "content": require_non_empty(pick("content"), "content"),
            "type": require_enum(AnnouncementType, pick("type", AnnouncementType.GENERAL), "type"),
            "priority": require_enum(Priority, pick("priority", Priority.MEDIUM), "priority"),
            "target_audience": require_enum(
                TargetAudience, pick("target_audience", TargetAudience.ALL), "target_audience"
            ),
            "start_at": start_at,
            "end_at": end_at,
        }

    def _require(self, announcement_id: int) -> Announcement:
        announcement = self._announcements.get_by_id(int(announcement_id))
        if not announcement:
            raise AnnouncementNotFoundError(announcement_id)
        return announcement

    def _with_current_status(self, announcement: Announcement, now: datetime) -> Announcement:
        status = derive_announcement_status(now, announcement.start_at, announcement.end_at)
        if status == announcement.status:
            return announcement
        self._announcements.set_status(announcement_id=announcement.announcement_id, status=status)
        return replace(announcement, status=status)

    def create_announcement(
        self, data: Mapping[str, Any], *, created_by: int, now: datetime | None = None
    ) -> Announcement:
        now = _resolve_now(now)
        fields = self._clean(data)
        status = derive_announcement_status(now, fields["start_at"], fields["end_at"])

        announcement_id = self._announcements.create_announcement(
            **fields, status=status, created_by=require_positive_int(created_by, "created_by")
        )
        logger.info("announcement_created", announcement_id=announcement_id, status=status.value)
        return self.get_announcement(announcement_id, now=now)

    def update_announcement(
        self, announcement_id: int, data: Mapping[str, Any], *, now: datetime | None = None
    ) -> Announcement:
        now = _resolve_now(now)
        current = self._require(announcement_id)
        fields = self._clean(data, current=current)
        status = derive_announcement_status(now, fields["start_at"], fields["end_at"])

        if not self._announcements.update_announcement(
            announcement_id=current.announcement_id, **fields, status=status
        ):
            raise AnnouncementNotFoundError(announcement_id)
        logger.info("announcement_updated", announcement_id=current.announcement_id, status=status.value)
        return self.get_announcement(current.announcement_id, now=now)

    def get_announcement(self, announcement_id: int, *, now: datetime | None = None) -> Announcement:
        return self._with_current_status(self._require(announcement_id), _resolve_now(now))

    def list_announcements(
        self,
        *,
        audience: TargetAudience | str | None = None,
        status: AnnouncementStatus | str | None = None,
        now: datetime | None = None,
    ) -> Sequence[Announcement]:
        """Listing for a specific audience also includes announcements meant for everyone."""
        now = _resolve_now(now)
        wanted_audience = require_enum(TargetAudience, audience, "audience") if audience else None
        wanted_status = require_enum(AnnouncementStatus, status, "status") if status else None

        result = []
        for a in self._announcements.list_all():
            if wanted_audience and a.target_audience not in (wanted_audience, TargetAudience.ALL):
                continue
            a = self._with_current_status(a, now)
            if wanted_status and a.status != wanted_status:
                continue
            result.append(a)
        return result

    def delete_announcement(self, announcement_id: int) -> None:
        announcement = self._require(announcement_id)
        self._announcements.delete_by_id(announcement.announcement_id)
        logger.info("announcement_deleted", announcement_id=announcement.announcement_id)

    def refresh_statuses(self, *, now: datetime | None = None) -> list[int]:
        """Sweep: rewrite every stale status. Returns the ids that changed."""
        now = _resolve_now(now)
        changed: list[int] = []
        for a in self._announcements.list_all():
            status = derive_announcement_status(now, a.start_at, a.end_at)
            if status != a.status and self._announcements.set_status(announcement_id=a.announcement_id, status=status):
                changed.append(a.announcement_id)
        logger.info("announcement_status_sweep", now=now.isoformat(), changed=changed)
        return changed
