"""Access domain - identity check before the catalog opens."""

from .exceptions import AccessDeniedError
from .gate import (
    AccessGate,
    AllowListAuthorizer,
    Authorizer,
    DocumentRoleAuthorizer,
    DocumentStore,
    Identity,
    Role,
    Session,
)

__all__ = [
    "AccessDeniedError",
    "AccessGate",
    "AllowListAuthorizer",
    "Authorizer",
    "DocumentRoleAuthorizer",
    "DocumentStore",
    "Identity",
    "Role",
    "Session",
]
