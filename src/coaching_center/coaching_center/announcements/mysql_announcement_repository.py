from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AnnouncementStatus, AnnouncementType, Priority, TargetAudience
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Announcement
from .repository import AnnouncementRepository

_SELECT = """
    SELECT announcement_id, title, content, type, priority, target_audience,
           start_at, end_at, status, created_by
    FROM announcements
"""


def _to_announcement(r: dict) -> Announcement:
    return Announcement(
        announcement_id=int(r["announcement_id"]),
        title=r["title"],
        content=r["content"],
        type=AnnouncementType(r["type"]),
        priority=Priority(r["priority"]),
        target_audience=TargetAudience(r["target_audience"]),
        start_at=r["start_at"],
        end_at=r["end_at"],
        status=AnnouncementStatus(r["status"]),
        created_by=int(r["created_by"]),
    )


class MySQLAnnouncementRepository(AnnouncementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, announcement_id: int) -> Optional[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE announcement_id=%s", (int(announcement_id),))
            r = fetchone(cur)
            return _to_announcement(r) if r else None

    def list_all(self) -> Sequence[Announcement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY start_at DESC, announcement_id DESC")
            return [_to_announcement(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO announcements(title, content, type, priority, target_audience,
                                          start_at, end_at, status, created_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (title, content, type.value, priority.value, target_audience.value,
                 start_at, end_at, status.value, int(created_by)),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE announcements
                SET title=%s, content=%s, type=%s, priority=%s, target_audience=%s,
                    start_at=%s, end_at=%s, status=%s
                WHERE announcement_id=%s
                """,
                (title, content, type.value, priority.value, target_audience.value,
                 start_at, end_at, status.value, int(announcement_id)),
            )
            cur.execute("SELECT 1 AS found FROM announcements WHERE announcement_id=%s", (int(announcement_id),))
            return fetchone(cur) is not None

    def set_status(self, *, announcement_id: int, status: AnnouncementStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE announcements SET status=%s WHERE announcement_id=%s AND status<>%s",
                (status.value, int(announcement_id), status.value),
            )
            return cur.rowcount > 0

    def delete_by_id(self, announcement_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM announcements WHERE announcement_id=%s", (int(announcement_id),))
            return cur.rowcount > 0
