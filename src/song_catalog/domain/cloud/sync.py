"""Push and pull the whole catalog as one cloud document."""

import json
from datetime import datetime, timezone
from typing import List, Optional

from loguru import logger

from ..catalog.models import Song
from ..catalog.store import songs_from_json, songs_to_json
from .exceptions import CloudStoreError
from .firestore import FirestoreClient


class CloudCatalogSync:
    """Stores the catalog as a JSON string field of a single document."""

    def __init__(
        self,
        client: FirestoreClient,
        collection: str = "catalogs",
        document_id: str = "default",
    ):
        self.client = client
        self.collection = collection
        self.document_id = document_id

    def push(self, songs: List[Song]) -> None:
        """Upload songs, replacing the remote copy."""
        self.client.set_document(
            self.collection,
            self.document_id,
            {
                "songs": songs_to_json(songs),
                "count": len(songs),
                "updated_at": datetime.now(timezone.utc).isoformat(),
            },
        )
        logger.info(f"Pushed {len(songs)} songs to {self.collection}/{self.document_id}")

    def pull(self) -> Optional[List[Song]]:
        """Download the remote catalog.

        Returns:
            The songs, or None if nothing was ever pushed

        Raises:
            CloudStoreError: If the document cannot be read or its payload is invalid
        """
        document = self.client.get_document(self.collection, self.document_id)
        if document is None:
            return None

        raw = document.get("songs")
        if not isinstance(raw, str):
            raise CloudStoreError("Cloud document has no songs field")

        try:
            songs = songs_from_json(raw)
        except (json.JSONDecodeError, ValueError) as e:
            raise CloudStoreError(f"Cloud catalog is not valid: {e}") from e

        logger.info(f"Pulled {len(songs)} songs from {self.collection}/{self.document_id}")
        return songs
