"""
Archive service.

Coordinates the share client, the folder transformer and the archive
database: fetch-and-render, get-or-create archiving, re-rendering of
stored folders and deletion.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Union

from .database import ArchiveDatabase, ArchivedFolder
from .folder_transformer import transform_arc_folder
from .models import ArcFolder, PresentationFolder
from .share_client import DEFAULT_SHARE_ORIGIN, ArcShareClient, ArcShareError

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


class ArchiveNotFoundError(Exception):
    """Raised when an archived folder record does not exist."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Archived folder not found: {record_id}")


class ArchiveService:
    """Service layer for archiving and rendering Arc folders."""

    def __init__(
        self,
        client: Optional[ArcShareClient] = None,
        database: Optional[ArchiveDatabase] = None,
        share_origin: str = DEFAULT_SHARE_ORIGIN,
    ):
        """
        Initialize the archive service.

        Args:
            client: Share client (a default client is created if omitted)
            database: Archive database (required for storage operations)
            share_origin: Share service origin used for canonical links
        """
        self.client = client or ArcShareClient(origin=share_origin)
        self.database = database
        self.share_origin = share_origin
        self.logger = logging.getLogger(__name__)

    def _require_database(self) -> ArchiveDatabase:
        if self.database is None:
            raise RuntimeError("Archive database not configured")
        return self.database

    def extract(self, arc_id: str) -> ArcFolder:
        """
        Extract a folder from the share service.

        Extraction errors are logged for operators and re-raised unchanged.
        """
        try:
            return self.client.extract_folder_data(arc_id)
        except ArcShareError as e:
            self.logger.warning(
                f"Arc folder {arc_id} unavailable ({type(e).__name__}): {e}"
            )
            raise

    def fetch_folder(
        self, arc_id: str, json_only: bool = False
    ) -> Union[Dict[str, Any], PresentationFolder]:
        """
        Fetch a folder without storing it.

        Args:
            arc_id: Arc share identifier
            json_only: Return the raw payload instead of the rendered tree

        Returns:
            Raw payload dict if json_only, else a PresentationFolder
        """
        folder = self.extract(arc_id)
        if json_only:
            return folder.to_payload()
        return transform_arc_folder(folder, self.share_origin)

    def get_or_create_folder(self, arc_id: str, delete_in_days: int) -> ArchivedFolder:
        """
        Return the archived record for a share id, archiving it if needed.

        Args:
            arc_id: Arc share identifier
            delete_in_days: Days until the new record may be purged

        Returns:
            Existing or newly created ArchivedFolder

        Raises:
            ValueError: If delete_in_days is not positive
            ArcShareError: If the folder cannot be extracted
        """
        if delete_in_days <= 0:
            raise ValueError("Invalid input parameters - Check the deleteInDays")

        database = self._require_database()

        existing = database.find_by_arc_id(arc_id)
        if existing:
            self.logger.info(f"Arc folder {arc_id} already archived as {existing.id}")
            return existing

        folder = self.extract(arc_id)
        delete_at = datetime.now() + timedelta(days=delete_in_days)

        return database.create(arc_id, folder.to_payload(), delete_at=delete_at)

    def render_folder(self, record_id: str) -> PresentationFolder:
        """
        Re-render a stored folder.

        Raises:
            ArchiveNotFoundError: If no record has this id
        """
        record = self._require_database().find_by_id(record_id)
        if record is None:
            raise ArchiveNotFoundError(record_id)
        return transform_arc_folder(record.to_arc_folder(), self.share_origin)

    def list_folders(self) -> List[ArchivedFolder]:
        return self._require_database().list_folders()

    def delete_folder(self, record_id: str) -> bool:
        """
        Delete a stored folder.

        Raises:
            ValueError: If the id is blank or not a UUID
        """
        if not record_id or not record_id.strip():
            raise ValueError("Invalid ID parameter.")

        if not UUID_PATTERN.match(record_id):
            raise ValueError("ID does not match expected format.")

        return self._require_database().delete_by_id(record_id)

    def purge_expired(self) -> int:
        return self._require_database().purge_expired()
