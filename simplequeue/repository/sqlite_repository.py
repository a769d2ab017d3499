"""
SQLite implementation of the job repository.

This module provides a concrete implementation of JobRepository using a
single ``jobs`` table.  Results are serialized with simplequeue.serialize.
"""

from __future__ import annotations

from datetime import datetime
import logging
import os
import sqlite3
import threading
from typing import Any, Optional

from simplequeue import serialize
from simplequeue.domain import Job, JobStatus
from simplequeue.errors import DeleteFailure, NotFound, StorageFailure
from simplequeue.utils import utcNow

from .interface import JobRepository

LOG = logging.getLogger(__name__)

# Schema version for this implementation
SCHEMA_VERSION = "1"


class SqliteJobRepository(JobRepository):
    """
    SQLite-based job repository.

    Job ids come from an AUTOINCREMENT primary key so that an id is never
    handed out twice, even after the job holding it is deleted.  The
    connection may be shared with scheduler threads; a lock serializes
    access to it.
    """

    def __init__(self, db_path: str):
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database file (":memory:" is accepted)
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()
        self._init_schema()

    def _ensure_db_dir(self):
        """Create database directory if it doesn't exist."""
        if self.db_path == ":memory:":
            return
        db_dir = os.path.dirname(self.db_path)
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection, creating if needed."""
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self):
        """Create database schema if it doesn't exist."""
        conn = self._get_conn()
        cursor = conn.cursor()

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS jobs (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                status INTEGER NOT NULL,
                hook TEXT NOT NULL,
                results TEXT,
                create_time TEXT NOT NULL,
                update_time TEXT
            )
        """)
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_jobs_status "
            "ON jobs(status)")

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS metadata (
                key TEXT PRIMARY KEY,
                value TEXT
            )
        """)
        cursor.execute(
            "INSERT OR IGNORE INTO metadata (key, value) VALUES (?, ?)",
            ("schema_version", SCHEMA_VERSION))

        conn.commit()

    def _row_to_job(self, row: sqlite3.Row) -> Job:
        """Convert database row to Job object."""
        return Job(
            id=row["id"],
            hook=row["hook"],
            status=JobStatus.fromCode(row["status"]),
            results=serialize.loads(row["results"]),
            create_time=datetime.fromisoformat(row["create_time"])
            if row["create_time"] else None,
            update_time=datetime.fromisoformat(row["update_time"])
            if row["update_time"] else None,
        )

    def create(self, hook: str) -> int:
        """Insert a new pending job."""
        with self._lock:
            conn = self._get_conn()
            try:
                cursor = conn.execute(
                    "INSERT INTO jobs (status, hook, results, create_time) "
                    "VALUES (?, ?, ?, ?)",
                    (int(JobStatus.PENDING), hook, "", utcNow().isoformat()))
                conn.commit()
            except sqlite3.Error as error:
                conn.rollback()
                LOG.debug("insert of hook %r failed", hook, exc_info=True)
                raise StorageFailure(
                    "Failed to insert the job.", code="insert_failed",
                    data={"cause": error}) from error

        job_id = cursor.lastrowid
        if not job_id:
            raise StorageFailure("Failed to insert the job.", code="insert_failed")
        LOG.debug("inserted job %d for hook %r", job_id, hook)
        return job_id

    def update(self, job_id: int, status: JobStatus, result: Any) -> bool:
        """Overwrite status and serialized results."""
        try:
            results = serialize.dumps(result)
        except (TypeError, ValueError) as error:
            raise StorageFailure(
                "Failed to serialize the job result.", code="update_failed",
                data={"cause": error}) from error

        with self._lock:
            conn = self._get_conn()
            try:
                cursor = conn.execute(
                    "UPDATE jobs SET status = ?, results = ?, update_time = ? "
                    "WHERE id = ?",
                    (int(status), results, utcNow().isoformat(), job_id))
                conn.commit()
            except sqlite3.Error as error:
                conn.rollback()
                raise StorageFailure(
                    "Failed to update the job status and result.",
                    code="update_failed", data={"cause": error}) from error

        if cursor.rowcount != 1:
            raise StorageFailure(
                "Failed to update the job status and result.",
                code="update_failed", data={"job_id": job_id})
        return True

    def claim(self, job_id: int) -> bool:
        """Conditionally move a pending job to processing."""
        with self._lock:
            conn = self._get_conn()
            try:
                cursor = conn.execute(
                    "UPDATE jobs SET status = ?, update_time = ? "
                    "WHERE id = ? AND status = ?",
                    (int(JobStatus.PROCESSING), utcNow().isoformat(), job_id,
                     int(JobStatus.PENDING)))
                conn.commit()
            except sqlite3.Error as error:
                conn.rollback()
                raise StorageFailure(
                    "Failed to claim the job.", code="update_failed",
                    data={"cause": error}) from error
        return cursor.rowcount == 1

    def find(self, job_id: int) -> Job:
        """Fetch and deserialize one job."""
        with self._lock:
            try:
                cursor = self._get_conn().execute(
                    "SELECT * FROM jobs WHERE id = ?", (job_id,))
                row = cursor.fetchone()
            except sqlite3.Error as error:
                raise StorageFailure(
                    "Failed to read the job.", code="select_failed",
                    data={"cause": error}) from error

        if row is None:
            raise NotFound(data={"job_id": job_id})

        try:
            return self._row_to_job(row)
        except ValueError as error:
            raise StorageFailure(
                "Failed to decode the job.", code="select_failed",
                data={"job_id": job_id, "cause": error}) from error

    def delete(self, job_id: int) -> bool:
        """Delete a job by id."""
        with self._lock:
            conn = self._get_conn()
            try:
                cursor = conn.execute("DELETE FROM jobs WHERE id = ?", (job_id,))
                conn.commit()
            except sqlite3.Error as error:
                conn.rollback()
                raise DeleteFailure(data={"cause": error}) from error

        if cursor.rowcount != 1:
            raise DeleteFailure(data={"job_id": job_id})
        return True

    def count(self, status: Optional[JobStatus] = None) -> int:
        """Count jobs, optionally only those with ``status``."""
        with self._lock:
            conn = self._get_conn()
            if status is None:
                cursor = conn.execute("SELECT COUNT(*) FROM jobs")
            else:
                cursor = conn.execute(
                    "SELECT COUNT(*) FROM jobs WHERE status = ?", (int(status),))
            row = cursor.fetchone()
        return row[0] if row else 0

    def close(self) -> None:
        """Close database connection."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
