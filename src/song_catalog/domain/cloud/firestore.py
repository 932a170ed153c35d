"""
Firestore REST client.

Only the two calls the catalog needs: read one document and write one
document. Field values are converted between plain Python values and
Firestore's typed value objects.
"""

from typing import Any, Dict, Optional

import requests
from loguru import logger

from .exceptions import CloudStoreError

API_BASE = "https://firestore.googleapis.com/v1"


def encode_value(value: Any) -> Dict[str, Any]:
    """Convert a plain value to a Firestore value object."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        # Firestore transports 64-bit integers as strings
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    raise TypeError(f"Unsupported Firestore value: {type(value).__name__}")


def decode_value(value: Dict[str, Any]) -> Any:
    """Convert a Firestore value object to a plain value."""
    if "stringValue" in value:
        return value["stringValue"]
    if "booleanValue" in value:
        return value["booleanValue"]
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        return value["timestampValue"]
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    return None


def encode_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: encode_value(val) for key, val in data.items()}


def decode_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {key: decode_value(val) for key, val in fields.items()}


class FirestoreClient:
    """Minimal document read/write against one Firestore project."""

    def __init__(
        self,
        project_id: str,
        api_key: str,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        if not project_id:
            raise CloudStoreError("Firestore project id is not configured")
        self.project_id = project_id
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def document_url(self, collection: str, document_id: str) -> str:
        return (
            f"{API_BASE}/projects/{self.project_id}/databases/(default)"
            f"/documents/{collection}/{document_id}"
        )

    def _params(self) -> Dict[str, str]:
        return {"key": self.api_key} if self.api_key else {}

    def get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a document's fields.

        Returns:
            Plain field values, or None if the document does not exist

        Raises:
            CloudStoreError: On network or HTTP errors
        """
        url = self.document_url(collection, document_id)
        try:
            response = self.session.get(url, params=self._params(), timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Firestore GET {collection}/{document_id} failed: {e}")
            raise CloudStoreError(f"Could not reach Firestore: {e}") from e

        if response.status_code == 404:
            logger.debug(f"Firestore document {collection}/{document_id} not found")
            return None

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.error(f"Firestore GET {collection}/{document_id}: {e}")
            raise CloudStoreError(
                f"Firestore read failed: {e}", status_code=response.status_code
            ) from e

        return decode_fields(response.json().get("fields", {}))

    def set_document(self, collection: str, document_id: str, data: Dict[str, Any]) -> None:
        """Create or replace a document with the given fields.

        Raises:
            CloudStoreError: On network or HTTP errors
        """
        url = self.document_url(collection, document_id)
        body = {"fields": encode_fields(data)}
        try:
            response = self.session.patch(
                url, params=self._params(), json=body, timeout=self.timeout
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.error(f"Firestore PATCH {collection}/{document_id}: {e}")
            raise CloudStoreError(
                f"Firestore write failed: {e}", status_code=response.status_code
            ) from e
        except requests.RequestException as e:
            logger.error(f"Firestore PATCH {collection}/{document_id} failed: {e}")
            raise CloudStoreError(f"Could not reach Firestore: {e}") from e

        logger.info(f"Wrote Firestore document {collection}/{document_id}")
