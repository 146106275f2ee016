"""Unit tests for APIKeyAuthenticator and the expiry/revocation policy."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from modules.apikeys.dtos import APIKeyRecord
from modules.apikeys.services import (
    DENY_INVALID,
    DENY_MISSING,
    DENY_UNAVAILABLE,
    APIKeyAuthenticator,
    AuthResult,
    reject_expired_or_revoked,
)
from modules.core.exceptions import StorageFailure

pytestmark = pytest.mark.unit


@pytest.fixture()
def mock_repo():
    return MagicMock()


@pytest.fixture()
def authenticator(mock_repo):
    return APIKeyAuthenticator(mock_repo)


class TestAuthenticate:
    @pytest.mark.parametrize("key", ["", None])
    def test_missing_key_denied_without_lookup(self, authenticator, mock_repo, key):
        result = authenticator.authenticate(key)
        assert result == AuthResult.deny(DENY_MISSING)
        mock_repo.find.assert_not_called()

    def test_unknown_key_denied(self, authenticator, mock_repo):
        mock_repo.find.return_value = []
        result = authenticator.authenticate("nope")
        assert not result.allowed
        assert result.reason == DENY_INVALID
        assert not result.inconsistent

    def test_single_match_allowed(self, authenticator, mock_repo):
        mock_repo.find.return_value = [APIKeyRecord(key="k", client_id="shop")]
        result = authenticator.authenticate("k")
        assert result.allowed
        assert result.client_id == "shop"
        mock_repo.find.assert_called_once_with("k")

    def test_duplicate_key_denied_and_flagged(self, mock_repo):
        log = MagicMock()
        authenticator = APIKeyAuthenticator(mock_repo, logger=log)
        mock_repo.find.return_value = [
            APIKeyRecord(key="k", client_id="a"),
            APIKeyRecord(key="k", client_id="b"),
        ]

        result = authenticator.authenticate("k")

        assert not result.allowed
        assert result.inconsistent
        # The caller sees the same reason as for an unknown key.
        assert result.reason == DENY_INVALID
        log.error.assert_called_once()
        assert log.error.call_args.args[0] == "apikey.inconsistent"

    def test_storage_failure_denied(self, authenticator, mock_repo):
        mock_repo.find.side_effect = StorageFailure("authenticate", "timeout")
        result = authenticator.authenticate("k")
        assert not result.allowed
        assert result.reason == DENY_UNAVAILABLE

    def test_policy_ignored_when_not_configured(self, authenticator, mock_repo):
        mock_repo.find.return_value = [APIKeyRecord(key="k", revoked=True)]
        assert authenticator.authenticate("k").allowed

    def test_policy_deny_reason_returned(self, mock_repo):
        mock_repo.find.return_value = [APIKeyRecord(key="k", revoked=True)]
        authenticator = APIKeyAuthenticator(mock_repo, policy=reject_expired_or_revoked)
        result = authenticator.authenticate("k")
        assert not result.allowed
        assert result.reason == "api key revoked"

    def test_policy_not_applied_to_duplicates(self, mock_repo):
        policy = MagicMock(return_value=None)
        mock_repo.find.return_value = [APIKeyRecord(key="k"), APIKeyRecord(key="k")]
        APIKeyAuthenticator(mock_repo, policy=policy).authenticate("k")
        policy.assert_not_called()


class TestRejectExpiredOrRevoked:
    def test_active_key_passes(self):
        assert reject_expired_or_revoked(APIKeyRecord(key="k")) is None

    def test_revoked(self):
        assert reject_expired_or_revoked(APIKeyRecord(key="k", revoked=True)) == "api key revoked"

    def test_expired(self):
        past = datetime.now(timezone.utc) - timedelta(minutes=1)
        record = APIKeyRecord(key="k", expiry=past)
        assert reject_expired_or_revoked(record) == "api key expired"

    def test_future_expiry_passes(self):
        future = datetime.now(timezone.utc) + timedelta(days=1)
        assert reject_expired_or_revoked(APIKeyRecord(key="k", expiry=future)) is None

    def test_naive_expiry_treated_as_utc(self):
        past = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(hours=1)
        record = APIKeyRecord(key="k", expiry=past)
        assert reject_expired_or_revoked(record) == "api key expired"
