"""Cloud domain - Firestore document store and catalog sync."""

from .exceptions import CloudStoreError
from .firestore import FirestoreClient, decode_fields, encode_fields
from .sync import CloudCatalogSync

__all__ = [
    "CloudStoreError",
    "FirestoreClient",
    "decode_fields",
    "encode_fields",
    "CloudCatalogSync",
]
