"""Access gate exceptions."""

from typing import Optional

from ..catalog.exceptions import CatalogError


class AccessDeniedError(CatalogError):
    """Raised when an identity is not authorized to open the catalog."""

    def __init__(self, email: Optional[str]):
        self.email = email
        if email:
            super().__init__(f"Not authorized: {email}")
        else:
            super().__init__("Not authorized: identity has no e-mail")
