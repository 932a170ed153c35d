"""
Access gate: decides whether an identity may open the catalog.

The gate asks one pluggable Authorizer for a role. No role means the
identity is signed out and AccessDeniedError is raised.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional, Protocol

from loguru import logger

from ..cloud.exceptions import CloudStoreError
from .exceptions import AccessDeniedError


class Role(str, Enum):
    ADMIN = "admin"
    MEMBER = "member"


@dataclass(frozen=True)
class Identity:
    """An authenticated principal; only the e-mail matters here."""

    email: Optional[str]

    @property
    def normalized_email(self) -> str:
        return (self.email or "").strip().lower()


@dataclass(frozen=True)
class Session:
    identity: Identity
    role: Role
    logout: Callable[[], None]

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


class Authorizer(Protocol):
    def authorize(self, identity: Identity) -> Optional[Role]: ...


class DocumentStore(Protocol):
    def get_document(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]: ...


class AllowListAuthorizer:
    """Grants admin to a fixed list of e-mails."""

    def __init__(self, allowed_emails: Iterable[str]):
        self.allowed = {e.strip().lower() for e in allowed_emails if e.strip()}

    def authorize(self, identity: Identity) -> Optional[Role]:
        email = identity.normalized_email
        if email and email in self.allowed:
            return Role.ADMIN
        return None


class DocumentRoleAuthorizer:
    """Reads the ``role`` field of ``<collection>/<email>`` from a document store."""

    def __init__(self, document_store: DocumentStore, collection: str = "users"):
        self.document_store = document_store
        self.collection = collection

    def authorize(self, identity: Identity) -> Optional[Role]:
        email = identity.normalized_email
        if not email:
            return None

        try:
            document = self.document_store.get_document(self.collection, email)
        except CloudStoreError as e:
            logger.error(f"Role lookup failed for {email}: {e}")
            return None

        if not document:
            return None

        try:
            return Role(str(document.get("role", "")).strip().lower())
        except ValueError:
            logger.warning(f"Unknown role {document.get('role')!r} for {email}")
            return None


class AccessGate:
    """Admits authorized identities and signs out everyone else."""

    def __init__(self, authorizer: Authorizer, sign_out: Callable[[], None]):
        self.authorizer = authorizer
        self.sign_out = sign_out

    def enter(self, identity: Identity) -> Session:
        """
        Raises:
            AccessDeniedError: If the identity has no role (after signing it out)
        """
        role = self.authorizer.authorize(identity) if identity.email else None
        if role is None:
            logger.warning(f"Access denied for {identity.email!r}")
            self.sign_out()
            raise AccessDeniedError(identity.email)

        logger.info(f"Access granted to {identity.email} as {role.value}")
        return Session(identity=identity, role=role, logout=self.sign_out)
