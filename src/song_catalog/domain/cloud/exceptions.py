"""Cloud store exceptions."""

from typing import Optional

from ..catalog.exceptions import CatalogError


class CloudStoreError(CatalogError):
    """Raised when the remote document store cannot be read or written."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
