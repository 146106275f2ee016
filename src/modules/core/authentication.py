"""API key authentication backend for Django REST Framework.

The ``Authorization`` header carries the raw key, with no scheme prefix.
The allow/deny decision is delegated to ``APIKeyAuthenticator``; this class
only moves the header in and turns a deny into a 401.

Security decisions
------------------
* **Fail Closed**: a missing header leaves the request anonymous, which the
  ``IsAuthenticated`` default permission rejects with 401.
* Deny reasons are generic; lookup details (duplicates, backend errors) are
  logged, never returned.
"""

import structlog
from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

from modules.core.backends import get_backends

logger = structlog.get_logger(__name__)


class APIKeyClient:
    """Lightweight user object for requests authenticated by API key.

    There is no local Django ``User`` row; views can read
    ``request.user.client_id``.
    """

    def __init__(self, client_id: str):
        self.client_id = client_id

    # DRF checks
    is_authenticated = True
    is_active = True

    def __str__(self) -> str:  # pragma: no cover
        return self.client_id or "api-key-client"


class APIKeyAuthentication(BaseAuthentication):
    """DRF authentication class that validates raw API keys."""

    keyword = "APIKey"

    def authenticate(self, request):
        """Return ``(APIKeyClient, key)`` or ``None`` (no credentials)."""
        key = request.META.get("HTTP_AUTHORIZATION", "")
        if not key:
            return None

        result = get_backends().authenticator.authenticate(key.strip())
        if not result.allowed:
            logger.warning("apikey_rejected", reason=result.reason)
            raise AuthenticationFailed(result.reason)

        logger.info("apikey_authenticated", client_id=result.client_id)
        return (APIKeyClient(result.client_id), key)

    def authenticate_header(self, request):
        """Value for the ``WWW-Authenticate`` response header on 401."""
        return f'{self.keyword} realm="api"'
