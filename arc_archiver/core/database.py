"""
Database-backed archive storage.

Stores scraped Arc folder payloads verbatim in SQLite so they can be
re-rendered later without contacting the share service again.
"""

import json
import logging
import sqlite3
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Union

from .models import ArcFolder


@dataclass
class ArchivedFolder:
    """Represents an archived folder record in the database."""

    id: str
    arc_id: str
    folder_data: Dict[str, Any]
    last_fetched_at: datetime
    delete_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> "ArchivedFolder":
        """Create from database row."""
        return cls(
            id=row["id"],
            arc_id=row["arc_id"],
            folder_data=json.loads(row["folder_data"]),
            last_fetched_at=datetime.fromisoformat(row["last_fetched_at"]),
            delete_at=datetime.fromisoformat(row["delete_at"]) if row["delete_at"] else None,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    def to_arc_folder(self) -> ArcFolder:
        """Re-validate the stored payload."""
        return ArcFolder.from_payload(self.folder_data)

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.delete_at is None:
            return False
        return self.delete_at <= (now or datetime.now())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "arc_id": self.arc_id,
            "folder_data": self.folder_data,
            "last_fetched_at": self.last_fetched_at.isoformat(),
            "delete_at": self.delete_at.isoformat() if self.delete_at else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class ArchiveDatabase:
    """
    SQLite storage for archived Arc folders.

    Example:
        >>> db = ArchiveDatabase(Path("archive.db"))
        >>> record = db.create("share-id", folder.to_payload())
        >>> db.find_by_arc_id("share-id").id == record.id
        True
    """

    SCHEMA = """
    CREATE TABLE IF NOT EXISTS archived_folders (
        id TEXT PRIMARY KEY,
        arc_id TEXT NOT NULL UNIQUE,
        folder_data TEXT NOT NULL,
        last_fetched_at TIMESTAMP NOT NULL,
        delete_at TIMESTAMP,
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_delete_at ON archived_folders(delete_at);
    """

    def __init__(self, db_path: Union[str, Path] = Path(".arc_archive.db")):
        """
        Initialize the archive database.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.logger = logging.getLogger(__name__)
        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        try:
            with self._get_connection() as conn:
                conn.executescript(self.SCHEMA)
                conn.commit()
            self.logger.debug(f"Database initialized at {self.db_path}")

        except sqlite3.Error as e:
            self.logger.error(f"Failed to initialize database: {e}")
            raise

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get database connection."""
        conn = None
        try:
            conn = sqlite3.connect(str(self.db_path))
            conn.row_factory = sqlite3.Row
            yield conn
        finally:
            if conn:
                conn.close()

    def find_by_arc_id(self, arc_id: str) -> Optional[ArchivedFolder]:
        """
        Find the archived folder for an Arc share id.

        Args:
            arc_id: Arc share identifier

        Returns:
            ArchivedFolder or None if not archived
        """
        return self._find_one("SELECT * FROM archived_folders WHERE arc_id = ?", arc_id)

    def find_by_id(self, record_id: str) -> Optional[ArchivedFolder]:
        """Find an archived folder by its record id."""
        return self._find_one("SELECT * FROM archived_folders WHERE id = ?", record_id)

    def _find_one(self, query: str, value: str) -> Optional[ArchivedFolder]:
        try:
            with self._get_connection() as conn:
                row = conn.execute(query + " LIMIT 1", (value,)).fetchone()
                return ArchivedFolder.from_row(row) if row else None

        except sqlite3.Error as e:
            self.logger.error(f"Database query failed: {e}")
            raise

    def list_folders(self) -> List[ArchivedFolder]:
        """List all archived folders, newest first."""
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "SELECT * FROM archived_folders ORDER BY created_at DESC"
                )
                return [ArchivedFolder.from_row(row) for row in cursor.fetchall()]

        except sqlite3.Error as e:
            self.logger.error(f"Error listing archived folders: {e}")
            raise

    def create(
        self,
        arc_id: str,
        folder_data: Dict[str, Any],
        delete_at: Optional[datetime] = None,
    ) -> ArchivedFolder:
        """
        Store a new archived folder.

        Args:
            arc_id: Arc share identifier (must be unique)
            folder_data: Raw folder payload, stored verbatim
            delete_at: Optional time after which the record may be purged

        Returns:
            The created ArchivedFolder

        Raises:
            sqlite3.IntegrityError: If the arc_id is already archived
        """
        now = datetime.now()
        record = ArchivedFolder(
            id=str(uuid.uuid4()),
            arc_id=arc_id,
            folder_data=folder_data,
            last_fetched_at=now,
            delete_at=delete_at,
            created_at=now,
            updated_at=now,
        )

        try:
            with self._get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO archived_folders
                    (id, arc_id, folder_data, last_fetched_at, delete_at,
                     created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        record.id,
                        record.arc_id,
                        json.dumps(folder_data),
                        record.last_fetched_at.isoformat(),
                        record.delete_at.isoformat() if record.delete_at else None,
                        record.created_at.isoformat(),
                        record.updated_at.isoformat(),
                    ),
                )
                conn.commit()

        except sqlite3.Error as e:
            self.logger.error(f"Database query failed: {e}")
            raise

        self.logger.info(f"Archived Arc folder {arc_id} as {record.id}")
        return record

    def delete_by_id(self, record_id: str) -> bool:
        """
        Delete an archived folder.

        Returns:
            True if a record was deleted
        """
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    "DELETE FROM archived_folders WHERE id = ?", (record_id,)
                )
                conn.commit()
                return cursor.rowcount > 0

        except sqlite3.Error as e:
            self.logger.error(f"Database query failed: {e}")
            raise

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """
        Delete all records whose deletion time has passed.

        Args:
            now: Reference time (defaults to current time)

        Returns:
            Number of records deleted
        """
        now = now or datetime.now()
        try:
            with self._get_connection() as conn:
                cursor = conn.execute(
                    """
                    DELETE FROM archived_folders
                    WHERE delete_at IS NOT NULL AND delete_at <= ?
                    """,
                    (now.isoformat(),),
                )
                conn.commit()
                deleted = cursor.rowcount

        except sqlite3.Error as e:
            self.logger.error(f"Error purging expired folders: {e}")
            raise

        if deleted:
            self.logger.info(f"Purged {deleted} expired archived folders")
        return deleted
