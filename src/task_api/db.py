from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

import structlog

from .cqrs.cancellation import CancellationToken
from .models import NewTask, Priority, TaskEntity
from .repositories import Repository, TaskFilter, check_cancelled

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    is_completed: str = "is_completed"
    created_at: str = "created_at"
    completed_at: str = "completed_at"
    priority: str = "priority"


_COLS = _Cols()


def _dt_to_db(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="microseconds") if value is not None else None


def _dt_from_db(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value is not None else None


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.

    A connection is opened per operation and committed when the block exits
    without an error.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()
        logger.info("sqlite_store_ready", path=db_path)

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.description} TEXT NULL,
                    {_COLS.is_completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.completed_at} TEXT NULL,
                    {_COLS.priority} INTEGER NOT NULL DEFAULT 2
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_is_completed ON {_COLS.table}({_COLS.is_completed})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_priority ON {_COLS.table}({_COLS.priority})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_created_at ON {_COLS.table}({_COLS.created_at})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TaskEntity:
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "description": row[_COLS.description],
            "is_completed": bool(row[_COLS.is_completed]),
            "created_at": _dt_from_db(row[_COLS.created_at]),  # type: ignore[typeddict-item]
            "completed_at": _dt_from_db(row[_COLS.completed_at]),
            "priority": Priority(int(row[_COLS.priority])),
        }

    def _select(self, conn: sqlite3.Connection, task_id: int) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,)).fetchone()

    def get(self, task_id: int, cancel: Optional[CancellationToken] = None) -> Optional[TaskEntity]:
        check_cancelled(cancel)
        with self._conn() as conn:
            row = self._select(conn, task_id)
            return self._row_to_entity(row) if row else None

    def add(self, task: NewTask, cancel: Optional[CancellationToken] = None) -> TaskEntity:
        check_cancelled(cancel)
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.description}, {_COLS.is_completed},
                    {_COLS.created_at}, {_COLS.completed_at}, {_COLS.priority})
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    task["title"],
                    task["description"],
                    1 if task["is_completed"] else 0,
                    _dt_to_db(task["created_at"]),
                    _dt_to_db(task["completed_at"]),
                    int(task["priority"]),
                ),
            )
            row = self._select(conn, cur.lastrowid)  # type: ignore[arg-type]
            assert row is not None
            return self._row_to_entity(row)

    def save(self, task: TaskEntity, cancel: Optional[CancellationToken] = None) -> Optional[TaskEntity]:
        check_cancelled(cancel)
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.description} = ?, {_COLS.is_completed} = ?,
                    {_COLS.completed_at} = ?, {_COLS.priority} = ?
                WHERE {_COLS.id} = ?
                """,
                (
                    task["title"],
                    task["description"],
                    1 if task["is_completed"] else 0,
                    _dt_to_db(task["completed_at"]),
                    int(task["priority"]),
                    task["id"],
                ),
            )
            if cur.rowcount == 0:
                return None
            row = self._select(conn, task["id"])
            assert row is not None
            return self._row_to_entity(row)

    def delete(self, task_id: int, cancel: Optional[CancellationToken] = None) -> bool:
        check_cancelled(cancel)
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,))
            return cur.rowcount > 0

    def list(
        self, query: Optional[TaskFilter] = None, cancel: Optional[CancellationToken] = None
    ) -> List[TaskEntity]:
        check_cancelled(cancel)
        q = query or TaskFilter()
        clauses = []
        params: list = []

        if q.is_completed is not None:
            clauses.append(f"{_COLS.is_completed} = ?")
            params.append(1 if q.is_completed else 0)

        if q.priority is not None:
            clauses.append(f"{_COLS.priority} = ?")
            params.append(int(q.priority))

        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with self._conn() as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM {_COLS.table}
                {where_sql}
                ORDER BY {_COLS.created_at} DESC, {_COLS.id} DESC
                """,
                params,
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def count(self, cancel: Optional[CancellationToken] = None) -> int:
        check_cancelled(cancel)
        with self._conn() as conn:
            row = conn.execute(f"SELECT COUNT(*) AS cnt FROM {_COLS.table}").fetchone()
            return int(row["cnt"]) if row else 0
