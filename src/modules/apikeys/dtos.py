"""API key DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class APIKeyRecord(BaseModel):
    """Immutable view of a stored API key.

    Only ``key`` matters to authentication; ``expiry`` and ``revoked`` are
    there for an optional policy hook.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    client_id: str = ""
    expiry: Optional[datetime] = None
    revoked: bool = False
