"""SQLite storage for donors, profiles, donations, blood requests and notifications."""

import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from utils.io import ensure_dir
from utils.logging import get_logger

logger = get_logger(__name__)

PROFILE_STATUSES = ("pending", "approved", "rejected")


class DonorDatabase:
    """Simple SQLite database backing the donor read endpoints."""

    def __init__(self, db_path: Path | str):
        """Initialize database file and create tables."""
        self.db_path = Path(db_path)
        ensure_dir(self.db_path.parent)
        self._lock = threading.Lock()

        self._init_schema()
        logger.info(f"Donor database initialized at {self.db_path}")

    def _init_schema(self):
        """Create database tables if they don't exist."""
        with self._get_connection() as conn:
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS donors (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT,
                    blood_group TEXT,
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS donor_profiles (
                    donor_id INTEGER PRIMARY KEY REFERENCES donors(id),
                    approval_status TEXT NOT NULL DEFAULT 'pending',
                    admin_remarks TEXT,
                    updated_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS donations (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    donor_id INTEGER NOT NULL REFERENCES donors(id),
                    donated_on TEXT NOT NULL,  -- YYYY-MM-DD
                    location TEXT NOT NULL,
                    units INTEGER NOT NULL DEFAULT 1,
                    blood_group TEXT,
                    status TEXT NOT NULL DEFAULT 'completed'
                );

                CREATE TABLE IF NOT EXISTS blood_requests (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    blood_group TEXT NOT NULL,
                    units INTEGER NOT NULL DEFAULT 1,
                    hospital TEXT NOT NULL,
                    urgency TEXT NOT NULL DEFAULT 'normal',
                    status TEXT NOT NULL DEFAULT 'open',
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS notifications (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    message TEXT NOT NULL,
                    is_read INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_donations_donor ON donations(donor_id, donated_on);
                CREATE INDEX IF NOT EXISTS idx_requests_status ON blood_requests(status);
                CREATE INDEX IF NOT EXISTS idx_notifications_user ON notifications(user_id, is_read);
            """)
            conn.commit()

    @contextmanager
    def _get_connection(self):
        """Get database connection with proper locking."""
        with self._lock:
            conn = sqlite3.connect(str(self.db_path))
            conn.row_factory = sqlite3.Row
            try:
                yield conn
            finally:
                conn.close()

    @staticmethod
    def _now_iso() -> str:
        return datetime.now(timezone.utc).isoformat()

    # ----- donors -----

    def add_donor(self, name: str, blood_group: Optional[str] = None,
                  email: Optional[str] = None) -> int:
        with self._get_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO donors (name, email, blood_group, created_at) VALUES (?, ?, ?, ?)",
                (name, email, blood_group, self._now_iso()),
            )
            conn.commit()
            return cursor.lastrowid

    def get_donor(self, donor_id: int) -> Optional[Dict[str, Any]]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT id, name, email, blood_group FROM donors WHERE id = ?",
                (donor_id,),
            ).fetchone()
        return dict(row) if row else None

    # ----- profiles -----

    def upsert_profile(self, donor_id: int, approval_status: str,
                       admin_remarks: Optional[str] = None) -> None:
        """Create or replace the approval state of a donor profile."""
        if approval_status not in PROFILE_STATUSES:
            raise ValueError(f"Unknown approval status: {approval_status!r}")
        with self._get_connection() as conn:
            conn.execute("""
                INSERT INTO donor_profiles (donor_id, approval_status, admin_remarks, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(donor_id) DO UPDATE SET
                    approval_status = excluded.approval_status,
                    admin_remarks = excluded.admin_remarks,
                    updated_at = excluded.updated_at
            """, (donor_id, approval_status, admin_remarks, self._now_iso()))
            conn.commit()

    def get_profile(self, donor_id: int) -> Optional[Dict[str, Any]]:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT approval_status, admin_remarks FROM donor_profiles WHERE donor_id = ?",
                (donor_id,),
            ).fetchone()
        return dict(row) if row else None

    # ----- donations -----

    def add_donation(self, donor_id: int, donated_on: date, location: str,
                     units: int = 1, blood_group: Optional[str] = None,
                     status: str = "completed") -> int:
        with self._get_connection() as conn:
            cursor = conn.execute("""
                INSERT INTO donations (donor_id, donated_on, location, units, blood_group, status)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (donor_id, donated_on.isoformat(), location, units, blood_group, status))
            conn.commit()
            return cursor.lastrowid

    def get_recent_donations(self, donor_id: int, limit: int) -> List[Dict[str, Any]]:
        """Completed donations for a donor, newest first."""
        with self._get_connection() as conn:
            rows = conn.execute("""
                SELECT donated_on, location, units, blood_group
                FROM donations
                WHERE donor_id = ? AND status = 'completed'
                ORDER BY donated_on DESC, id DESC
                LIMIT ?
            """, (donor_id, limit)).fetchall()
        return [dict(row) for row in rows]

    def get_last_donation_date(self, donor_id: int) -> Optional[date]:
        with self._get_connection() as conn:
            row = conn.execute("""
                SELECT MAX(donated_on) FROM donations
                WHERE donor_id = ? AND status = 'completed'
            """, (donor_id,)).fetchone()
        if not row or row[0] is None:
            return None
        return date.fromisoformat(row[0])

    def get_donation_stats(self, donor_id: int) -> Tuple[int, int]:
        """Return ``(donation_count, total_units)`` of completed donations."""
        with self._get_connection() as conn:
            row = conn.execute("""
                SELECT COUNT(*), COALESCE(SUM(units), 0) FROM donations
                WHERE donor_id = ? AND status = 'completed'
            """, (donor_id,)).fetchone()
        return int(row[0]), int(row[1])

    # ----- blood requests -----

    def add_blood_request(self, blood_group: str, hospital: str, units: int = 1,
                          urgency: str = "normal", status: str = "open") -> int:
        with self._get_connection() as conn:
            cursor = conn.execute("""
                INSERT INTO blood_requests (blood_group, units, hospital, urgency, status, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (blood_group, units, hospital, urgency, status, self._now_iso()))
            conn.commit()
            return cursor.lastrowid

    def get_open_requests(self, blood_groups: Iterable[str]) -> List[Dict[str, Any]]:
        """Open requests for any of ``blood_groups``, newest first."""
        groups = sorted(set(blood_groups))
        if not groups:
            return []
        placeholders = ", ".join("?" for _ in groups)
        with self._get_connection() as conn:
            rows = conn.execute(f"""
                SELECT id, blood_group, units, hospital, urgency, created_at
                FROM blood_requests
                WHERE status = 'open' AND blood_group IN ({placeholders})
                ORDER BY created_at DESC, id DESC
            """, groups).fetchall()
        return [dict(row) for row in rows]

    # ----- notifications -----

    def add_notification(self, user_id: int, message: str, is_read: bool = False) -> int:
        with self._get_connection() as conn:
            cursor = conn.execute("""
                INSERT INTO notifications (user_id, message, is_read, created_at)
                VALUES (?, ?, ?, ?)
            """, (user_id, message, int(is_read), self._now_iso()))
            conn.commit()
            return cursor.lastrowid

    def count_unread_notifications(self, user_id: int) -> int:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM notifications WHERE user_id = ? AND is_read = 0",
                (user_id,),
            ).fetchone()
        return int(row[0])


_db_instance: Optional[DonorDatabase] = None
_db_instance_lock = threading.Lock()


def get_database(db_path: Optional[Path | str] = None) -> DonorDatabase:
    """Return the process-wide database, creating it on first use."""
    global _db_instance
    with _db_instance_lock:
        if _db_instance is None:
            if db_path is None:
                from config.config import DATABASE_PATH
                db_path = DATABASE_PATH
            _db_instance = DonorDatabase(db_path)
        return _db_instance
