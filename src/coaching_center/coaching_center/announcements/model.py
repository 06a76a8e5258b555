from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import AnnouncementStatus, AnnouncementType, Priority, TargetAudience


@dataclass(frozen=True)
class Announcement:
    """Domain entity: a notice shown to an audience during its window."""

    announcement_id: int
    title: str
    content: str
    type: AnnouncementType
    priority: Priority
    target_audience: TargetAudience
    start_at: datetime
    end_at: datetime
    status: AnnouncementStatus
    created_by: int

    def to_dict(self) -> dict:
        return {
            "announcement_id": self.announcement_id,
            "title": self.title,
            "content": self.content,
            "type": self.type.value,
            "priority": self.priority.value,
            "target_audience": self.target_audience.value,
            "start_at": self.start_at.isoformat(),
            "end_at": self.end_at.isoformat(),
            "status": self.status.value,
            "created_by": self.created_by,
        }
