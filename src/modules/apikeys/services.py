"""API key authentication (the allow/deny contract).

``APIKeyAuthenticator`` maps a presented key to an ``AuthResult``.  It never
raises: every failure becomes a deny with a caller-safe reason, while the
details go to the log.  Transport concerns (reading the header, HTTP status
codes) live in ``modules.core.authentication``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Callable, Optional

import structlog

from modules.core.exceptions import StorageFailure

if TYPE_CHECKING:
    from modules.apikeys.dtos import APIKeyRecord
    from modules.apikeys.repositories.interfaces import IAPIKeyRepository

KeyPolicy = Callable[["APIKeyRecord"], Optional[str]]

DENY_MISSING = "missing api key"
DENY_INVALID = "invalid api key"
DENY_UNAVAILABLE = "api key lookup unavailable"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of one authentication attempt.

    ``inconsistent`` is set when the key matched more than one record.  It is
    meant for observability; ``reason`` never reveals it.
    """

    allowed: bool
    reason: str = ""
    client_id: str = ""
    inconsistent: bool = False

    @classmethod
    def allow(cls, client_id: str = "") -> AuthResult:
        return cls(allowed=True, client_id=client_id)

    @classmethod
    def deny(cls, reason: str, inconsistent: bool = False) -> AuthResult:
        return cls(allowed=False, reason=reason, inconsistent=inconsistent)


def reject_expired_or_revoked(record: APIKeyRecord) -> Optional[str]:
    """Policy hook: deny revoked keys and keys past their expiry."""
    if record.revoked:
        return "api key revoked"
    if record.expiry is not None:
        expiry = record.expiry
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        if expiry <= datetime.now(timezone.utc):
            return "api key expired"
    return None


class APIKeyAuthenticator:
    """Checks presented keys against an ``IAPIKeyRepository``.

    ``policy`` is an optional hook applied to the single matching record; it
    returns a deny reason or ``None``.
    """

    def __init__(
        self,
        repository: IAPIKeyRepository,
        policy: Optional[KeyPolicy] = None,
        logger: Optional[Any] = None,
    ) -> None:
        self._repo = repository
        self._policy = policy
        self._log = logger or structlog.get_logger(__name__)

    def authenticate(self, key: Optional[str]) -> AuthResult:
        if not key:
            return AuthResult.deny(DENY_MISSING)

        try:
            records = self._repo.find(key)
        except StorageFailure as exc:
            self._log.error("apikey.lookup_failed", error=exc.message)
            return AuthResult.deny(DENY_UNAVAILABLE)

        if not records:
            self._log.info("apikey.unknown")
            return AuthResult.deny(DENY_INVALID)
        if len(records) > 1:
            # Provisioning bug: the same key was stored more than once.
            self._log.error(
                "apikey.inconsistent",
                matches=len(records),
                client_ids=sorted(r.client_id for r in records),
            )
            return AuthResult.deny(DENY_INVALID, inconsistent=True)

        record = records[0]
        if self._policy is not None:
            reason = self._policy(record)
            if reason:
                self._log.info("apikey.rejected_by_policy", client_id=record.client_id, reason=reason)
                return AuthResult.deny(reason)

        self._log.debug("apikey.authenticated", client_id=record.client_id)
        return AuthResult.allow(client_id=record.client_id)
