from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AnnouncementStatus, AnnouncementType, Priority, TargetAudience
from .model import Announcement


class AnnouncementRepository(Protocol):
    def get_by_id(self, announcement_id: int) -> Optional[Announcement]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Announcement]:
        """Newest window first."""

        raise NotImplementedError

    def create_announcement(
        self,
        *,
        title: str,
        content: str,
        type: AnnouncementType,
        priority: Priority,
        target_audience: TargetAudience,
        start_at: datetime,
        end_at: datetime,
        status: AnnouncementStatus,
        created_by: int,
    ) -> int:
        raise NotImplementedError

    def update_announcement(
        self,
        *,
        announcement_id: int,
        title: str,
        content: str,
        type: AnnouncementType,
        priority: Priority,
        target_audience: TargetAudience,
        start_at: datetime,
        end_at: datetime,
        status: AnnouncementStatus,
    ) -> bool:
        raise NotImplementedError

    def set_status(self, *, announcement_id: int, status: AnnouncementStatus) -> bool:
        """Returns True only if the stored status actually changed."""

        raise NotImplementedError

    def delete_by_id(self, announcement_id: int) -> bool:
        raise NotImplementedError
