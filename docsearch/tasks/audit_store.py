"""Task audit store with SQLite persistence."""

from __future__ import annotations

import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path

from docsearch.core.types import TaskAuditRecord, TaskStatus


class AuditStoreError(RuntimeError):
    """Raised when the audit store cannot be written or read."""


class AuditStore(ABC):
    """Append-only record of task lifecycle, written before a task is queued."""

    @abstractmethod
    def insert_task(self, record: TaskAuditRecord) -> None:
        pass

    @abstractmethod
    def get_task(self, task_id: str) -> TaskAuditRecord | None:
        pass


class SQLiteAuditStore(AuditStore):
    """SQLite-backed audit store with WAL mode."""

    def __init__(self, db_path: str = "data/db/task_audit.db") -> None:
        self.db_path = str(db_path)
        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        try:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")
            return conn
        except Exception:
            conn.close()
            raise

    def _init_schema(self) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS file_tasks (
                    id TEXT PRIMARY KEY,
                    file_name TEXT NOT NULL,
                    pages INTEGER NOT NULL DEFAULT 0,
                    pages_processed INTEGER NOT NULL DEFAULT 0,
                    status TEXT NOT NULL,
                    created_at TIMESTAMP NOT NULL
                )
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS idx_file_tasks_status ON file_tasks(status)")
            conn.commit()
        finally:
            conn.close()

    def insert_task(self, record: TaskAuditRecord) -> None:
        conn: sqlite3.Connection | None = None
        try:
            conn = self._connect()
            conn.execute(
                """
                INSERT INTO file_tasks (id, file_name, pages, pages_processed, status, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    record.id,
                    record.file_name,
                    record.pages,
                    record.pages_processed,
                    record.status.value,
                    record.created_at.isoformat(),
                ),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise AuditStoreError(f"Failed to insert task {record.id}: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def get_task(self, task_id: str) -> TaskAuditRecord | None:
        conn = self._connect()
        try:
            row = conn.execute(
                "SELECT id, file_name, pages, pages_processed, status, created_at "
                "FROM file_tasks WHERE id = ?",
                (task_id,),
            ).fetchone()
        finally:
            conn.close()

        if row is None:
            return None
        return TaskAuditRecord(
            id=row[0],
            file_name=row[1],
            pages=row[2],
            pages_processed=row[3],
            status=TaskStatus(row[4]),
            created_at=datetime.fromisoformat(row[5]),
        )
