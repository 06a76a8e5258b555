from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import StudentStatus
from ..core.exceptions import DuplicateEmailError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, group_ids, split_csv_ids
from .model import Student
from .repository import StudentRepository

_SELECT = """
    SELECT
        s.student_id, s.name, s.email, s.phone, s.standard_id, s.subject_ids,
        s.status, s.joining_date, s.parent_name, s.parent_phone
    FROM students s
"""


def _to_student(r: dict, batch_ids: Iterable[int]) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        name=r["name"],
        email=r["email"],
        phone=r["phone"],
        standard_id=int(r["standard_id"]),
        subject_ids=split_csv_ids(r.get("subject_ids")),
        batch_ids=frozenset(batch_ids),
        status=StudentStatus(r["status"]),
        joining_date=r.get("joining_date"),
        parent_name=r.get("parent_name"),
        parent_phone=r.get("parent_phone"),
    )


def _csv(ids: Sequence[int]) -> str:
    return ",".join(str(int(i)) for i in ids)


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _one(self, where: str, param) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE " + where, (param,))
            r = fetchone(cur)
            if not r:
                return None
            cur.execute("SELECT batch_id FROM student_batches WHERE student_id=%s", (int(r["student_id"]),))
            return _to_student(r, (int(b["batch_id"]) for b in fetchall(cur)))

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._one("s.student_id=%s", int(student_id))

    def get_by_email(self, email: str) -> Optional[Student]:
        return self._one("s.email=%s", email.lower())

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " ORDER BY s.student_id")
            rows = fetchall(cur)
            cur.execute("SELECT student_id, batch_id FROM student_batches")
            links = group_ids(fetchall(cur), key="student_id", value="batch_id")
            return [_to_student(r, links.get(int(r["student_id"]), ())) for r in rows]

    def create_student(
        self,
        *,
        name: str,
        email: str,
        phone: str,
        standard_id: int,
        subject_ids: Sequence[int],
        status: StudentStatus,
        joining_date: Optional[date] = None,
        parent_name: Optional[str] = None,
        parent_phone: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO students(name, email, phone, standard_id, subject_ids, status,
                                         joining_date, parent_name, parent_phone)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (name, email, phone, int(standard_id), _csv(subject_ids), status.value,
                     joining_date, parent_name, parent_phone),
                )
            except mysql.connector.IntegrityError as exc:
                if exc.errno == errorcode.ER_DUP_ENTRY:
                    raise DuplicateEmailError(email) from exc
                raise
            return int(cur.lastrowid)

    def update_student(
        self,
        *,
        student_id: int,
        name: str,
        email: str,
        phone: str,
        standard_id: int,
        subject_ids: Sequence[int],
        status: StudentStatus,
        joining_date: Optional[date] = None,
        parent_name: Optional[str] = None,
        parent_phone: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    UPDATE students
                    SET name=%s, email=%s, phone=%s, standard_id=%s, subject_ids=%s, status=%s,
                        joining_date=%s, parent_name=%s, parent_phone=%s
                    WHERE student_id=%s
                    """,
                    (name, email, phone, int(standard_id), _csv(subject_ids), status.value,
                     joining_date, parent_name, parent_phone, int(student_id)),
                )
            except mysql.connector.IntegrityError as exc:
                if exc.errno == errorcode.ER_DUP_ENTRY:
                    raise DuplicateEmailError(email) from exc
                raise
            # MySQL reports 0 affected rows when nothing changed, so check existence instead.
            cur.execute("SELECT 1 AS found FROM students WHERE student_id=%s", (int(student_id),))
            return fetchone(cur) is not None

    def delete_by_id(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0

    def add_batch(self, *, student_id: int, batch_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO student_batches(student_id, batch_id) VALUES(%s,%s)",
                (int(student_id), int(batch_id)),
            )
            return cur.rowcount > 0

    def remove_batch(self, *, student_id: int, batch_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM student_batches WHERE student_id=%s AND batch_id=%s",
                (int(student_id), int(batch_id)),
            )
            return cur.rowcount > 0

    def list_student_ids_with_batch(self, batch_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id FROM student_batches WHERE batch_id=%s ORDER BY student_id",
                (int(batch_id),),
            )
            return [int(r["student_id"]) for r in fetchall(cur)]
