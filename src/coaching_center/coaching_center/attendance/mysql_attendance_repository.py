from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, batch_id, attendance_date, status, remarks, marked_by"


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=int(r["student_id"]),
        batch_id=int(r["batch_id"]),
        attendance_date=r["attendance_date"],
        status=AttendanceStatus(r["status"]),
        remarks=r.get("remarks") or "",
        marked_by=int(r["marked_by"]) if r.get("marked_by") is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(
        self,
        *,
        student_id: int,
        batch_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        remarks: str = "",
        marked_by: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, batch_id, attendance_date, status, remarks, marked_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), remarks=VALUES(remarks), marked_by=VALUES(marked_by)
                """,
                (int(student_id), int(batch_id), attendance_date, status.value, remarks or "", marked_by),
            )

            # On the update path lastrowid can be 0; look the row up by its key.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                """
                SELECT attendance_id FROM attendance_records
                WHERE student_id=%s AND batch_id=%s AND attendance_date=%s
                """,
                (int(student_id), int(batch_id), attendance_date),
            )
            r = fetchone(cur)
            return int(r["attendance_id"]) if r else 0

    def list_for_batch_and_date(self, *, batch_id: int, attendance_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE batch_id=%s AND attendance_date=%s
                ORDER BY student_id
                """,
                (int(batch_id), attendance_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_batch_range(self, *, batch_id: int, start: date, end: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE batch_id=%s AND attendance_date BETWEEN %s AND %s
                ORDER BY attendance_date ASC, student_id ASC
                """,
                (int(batch_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_student_and_batch(
        self,
        *,
        student_id: int,
        batch_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["student_id=%s", "batch_id=%s"]
        params: list[object] = [int(student_id), int(batch_id)]
        if start is not None:
            clauses.append("attendance_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("attendance_date <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE {where} ORDER BY attendance_date DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def delete_for_student(self, student_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE student_id=%s", (int(student_id),))
            return int(cur.rowcount)

    def delete_for_batch(self, batch_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE batch_id=%s", (int(batch_id),))
            return int(cur.rowcount)
