from __future__ import annotations

from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateEmailError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, split_csv_ids
from .model import Teacher
from .repository import TeacherRepository


def _to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=int(r["teacher_id"]),
        name=r["name"],
        email=r["email"],
        phone=r.get("phone") or "",
        subject_ids=split_csv_ids(r.get("subject_ids")),
    )


class MySQLTeacherRepository(TeacherRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, teacher_id: int) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT teacher_id, name, email, phone, subject_ids FROM teachers WHERE teacher_id=%s",
                (int(teacher_id),),
            )
            r = fetchone(cur)
            return _to_teacher(r) if r else None

    def get_by_email(self, email: str) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT teacher_id, name, email, phone, subject_ids FROM teachers WHERE email=%s",
                (email.lower(),),
            )
            r = fetchone(cur)
            return _to_teacher(r) if r else None

    def list_all(self) -> Sequence[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT teacher_id, name, email, phone, subject_ids FROM teachers ORDER BY teacher_id")
            return [_to_teacher(r) for r in fetchall(cur)]

    def create_teacher(self, *, name: str, email: str, phone: str, subject_ids: Sequence[int]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    "INSERT INTO teachers(name, email, phone, subject_ids) VALUES(%s,%s,%s,%s)",
                    (name, email, phone, ",".join(str(int(i)) for i in subject_ids)),
                )
            except mysql.connector.IntegrityError as exc:
                if exc.errno == errorcode.ER_DUP_ENTRY:
                    raise DuplicateEmailError(email) from exc
                raise
            return int(cur.lastrowid)
