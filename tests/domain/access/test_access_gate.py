"""Tests for the access gate and its authorizers."""

from unittest.mock import MagicMock

import pytest

from song_catalog.domain.access import (
    AccessDeniedError,
    AccessGate,
    AllowListAuthorizer,
    DocumentRoleAuthorizer,
    Identity,
    Role,
)
from song_catalog.domain.cloud.exceptions import CloudStoreError


class FakeDocuments:
    def __init__(self, documents):
        self.documents = documents
        self.requests = []

    def get_document(self, collection, document_id):
        self.requests.append((collection, document_id))
        return self.documents.get((collection, document_id))


class TestAllowList:
    def test_listed_email_is_admin(self):
        authorizer = AllowListAuthorizer(["owner@example.com"])

        assert authorizer.authorize(Identity("Owner@Example.com")) is Role.ADMIN

    def test_unknown_email_denied(self):
        authorizer = AllowListAuthorizer(["owner@example.com"])

        assert authorizer.authorize(Identity("guest@example.com")) is None
        assert authorizer.authorize(Identity(None)) is None


class TestDocumentRoles:
    def test_reads_role_field(self):
        documents = FakeDocuments({
            ("users", "ana@example.com"): {"role": "admin"},
            ("users", "leo@example.com"): {"role": "member"},
        })
        authorizer = DocumentRoleAuthorizer(documents)

        assert authorizer.authorize(Identity("ana@example.com")) is Role.ADMIN
        assert authorizer.authorize(Identity("leo@example.com")) is Role.MEMBER

    def test_missing_document_or_bad_role_denied(self):
        documents = FakeDocuments({("users", "eve@example.com"): {"role": "owner"}})
        authorizer = DocumentRoleAuthorizer(documents)

        assert authorizer.authorize(Identity("eve@example.com")) is None
        assert authorizer.authorize(Identity("nobody@example.com")) is None

    def test_lookup_failure_denied(self):
        documents = MagicMock()
        documents.get_document.side_effect = CloudStoreError("offline")

        assert DocumentRoleAuthorizer(documents).authorize(Identity("ana@example.com")) is None

    def test_custom_collection(self):
        documents = FakeDocuments({("members", "ana@example.com"): {"role": "admin"}})

        authorizer = DocumentRoleAuthorizer(documents, collection="members")

        assert authorizer.authorize(Identity("ana@example.com")) is Role.ADMIN


class TestGate:
    def test_authorized_identity_gets_session(self):
        sign_out = MagicMock()
        gate = AccessGate(AllowListAuthorizer(["ana@example.com"]), sign_out)

        session = gate.enter(Identity("ana@example.com"))

        assert session.role is Role.ADMIN
        assert session.is_admin
        assert session.identity.email == "ana@example.com"
        sign_out.assert_not_called()

        session.logout()
        sign_out.assert_called_once()

    def test_unauthorized_identity_signed_out(self):
        sign_out = MagicMock()
        gate = AccessGate(AllowListAuthorizer(["ana@example.com"]), sign_out)

        with pytest.raises(AccessDeniedError):
            gate.enter(Identity("eve@example.com"))

        sign_out.assert_called_once()

    def test_identity_without_email_denied(self):
        sign_out = MagicMock()
        authorizer = MagicMock()
        gate = AccessGate(authorizer, sign_out)

        with pytest.raises(AccessDeniedError):
            gate.enter(Identity(None))

        authorizer.authorize.assert_not_called()
        sign_out.assert_called_once()
