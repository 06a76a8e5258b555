from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..core.enums import BatchStatus, BatchUpdate, RosterChange, Weekday
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, group_ids
from .model import Batch, BatchSchedule
from .repository import BatchRepository

_SELECT = """
    SELECT
        b.batch_id, b.name, b.standard_id, b.subject_id, b.teacher_id,
        b.start_date, b.end_date, b.schedule_days, b.schedule_start, b.schedule_end,
        b.capacity, b.fees, b.status, b.description
    FROM batches b
"""


def _to_batch(r: dict, student_ids: Iterable[int]) -> Batch:
    days = tuple(Weekday(d) for d in (r.get("schedule_days") or "").split(",") if d)
    return Batch(
        batch_id=int(r["batch_id"]),
        name=r["name"],
        standard_id=int(r["standard_id"]),
        subject_id=int(r["subject_id"]),
        teacher_id=int(r["teacher_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        schedule=BatchSchedule(days=days, start_time=r["schedule_start"], end_time=r["schedule_end"]),
        capacity=int(r["capacity"]),
        fees=Decimal(r["fees"]),
        status=BatchStatus(r["status"]),
        enrolled_student_ids=frozenset(student_ids),
        description=r.get("description"),
    )


def _schedule_columns(schedule: BatchSchedule) -> tuple:
    return (",".join(d.value for d in schedule.days), schedule.start_time, schedule.end_time)


class MySQLBatchRepository(BatchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, batch_id: int) -> Optional[Batch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE b.batch_id=%s", (int(batch_id),))
            r = fetchone(cur)
            if not r:
                return None
            cur.execute("SELECT student_id FROM batch_enrollments WHERE batch_id=%s", (int(batch_id),))
            return _to_batch(r, (int(e["student_id"]) for e in fetchall(cur)))

    def list_all(self) -> Sequence[Batch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY b.batch_id")
            rows = fetchall(cur)
            cur.execute("SELECT batch_id, student_id FROM batch_enrollments")
            rosters = group_ids(fetchall(cur), key="batch_id", value="student_id")
            return [_to_batch(r, rosters.get(int(r["batch_id"]), ())) for r in rows]

    def create_batch(
        self,
        *,
        name: str,
        standard_id: int,
        subject_id: int,
        teacher_id: int,
        start_date: date,
        end_date: date,
        schedule: BatchSchedule,
        capacity: int,
        fees: Decimal,
        status: BatchStatus,
        description: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO batches(name, standard_id, subject_id, teacher_id, start_date, end_date,
                                    schedule_days, schedule_start, schedule_end,
                                    capacity, fees, status, description)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (name, int(standard_id), int(subject_id), int(teacher_id), start_date, end_date,
                 *_schedule_columns(schedule), int(capacity), fees, status.value, description),
            )
            return int(cur.lastrowid)

    def update_batch(
        self,
        *,
        batch_id: int,
        name: str,
        standard_id: int,
        subject_id: int,
        teacher_id: int,
        start_date: date,
        end_date: date,
        schedule: BatchSchedule,
        capacity: int,
        fees: Decimal,
        status: BatchStatus,
        description: Optional[str] = None,
    ) -> BatchUpdate:
        with db_cursor(self._conn_factory) as (_, cur):
            # Same row lock as add_to_roster, so the roster cannot grow past the check.
            cur.execute("SELECT batch_id FROM batches WHERE batch_id=%s FOR UPDATE", (int(batch_id),))
            if not fetchone(cur):
                return BatchUpdate.BATCH_MISSING

            cur.execute("SELECT COUNT(*) AS n FROM batch_enrollments WHERE batch_id=%s", (int(batch_id),))
            if int(fetchone(cur)["n"]) > int(capacity):
                return BatchUpdate.BELOW_ROSTER

            cur.execute(
                """
                UPDATE batches
                SET name=%s, standard_id=%s, subject_id=%s, teacher_id=%s, start_date=%s, end_date=%s,
                    schedule_days=%s, schedule_start=%s, schedule_end=%s,
                    capacity=%s, fees=%s, status=%s, description=%s
                WHERE batch_id=%s
                """,
                (name, int(standard_id), int(subject_id), int(teacher_id), start_date, end_date,
                 *_schedule_columns(schedule), int(capacity), fees, status.value, description, int(batch_id)),
            )
            return BatchUpdate.UPDATED

    def set_status(self, *, batch_id: int, status: BatchStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE batches SET status=%s WHERE batch_id=%s AND status<>%s",
                (status.value, int(batch_id), status.value),
            )
            return cur.rowcount > 0

    def delete_by_id(self, batch_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM batches WHERE batch_id=%s", (int(batch_id),))
            return cur.rowcount > 0

    def add_to_roster(self, *, batch_id: int, student_id: int) -> RosterChange:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on the batch serialises every roster append for it.
            cur.execute("SELECT capacity FROM batches WHERE batch_id=%s FOR UPDATE", (int(batch_id),))
            batch_row = fetchone(cur)
            if not batch_row:
                return RosterChange.BATCH_MISSING

            cur.execute(
                "SELECT 1 AS found FROM batch_enrollments WHERE batch_id=%s AND student_id=%s",
                (int(batch_id), int(student_id)),
            )
            if fetchone(cur):
                return RosterChange.ALREADY_PRESENT

            cur.execute("SELECT COUNT(*) AS n FROM batch_enrollments WHERE batch_id=%s", (int(batch_id),))
            if int(fetchone(cur)["n"]) >= int(batch_row["capacity"]):
                return RosterChange.FULL

            cur.execute(
                "INSERT INTO batch_enrollments(batch_id, student_id) VALUES(%s,%s)",
                (int(batch_id), int(student_id)),
            )
            return RosterChange.ADDED

    def remove_from_roster(self, *, batch_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM batch_enrollments WHERE batch_id=%s AND student_id=%s",
                (int(batch_id), int(student_id)),
            )
            return cur.rowcount > 0

    def list_batch_ids_for_student(self, student_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT batch_id FROM batch_enrollments WHERE student_id=%s ORDER BY batch_id",
                (int(student_id),),
            )
            return [int(r["batch_id"]) for r in fetchall(cur)]
