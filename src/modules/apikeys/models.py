"""API key storage.

``key`` is indexed but deliberately not unique: a duplicate is a provisioning
bug that the authenticator detects and reports rather than a write the
database refuses.
"""

from __future__ import annotations

from django.db import models

from modules.apikeys.dtos import APIKeyRecord
from modules.core.models import BaseModel


class APIKey(BaseModel):
    key = models.CharField(max_length=255, db_index=True)
    client_id = models.CharField(max_length=255, blank=True, default="")
    expiry = models.DateTimeField(null=True, blank=True, default=None)
    revoked = models.BooleanField(default=False)

    class Meta:
        db_table = "apikeys"

    def to_record(self) -> APIKeyRecord:
        return APIKeyRecord(
            key=self.key,
            client_id=self.client_id,
            expiry=self.expiry,
            revoked=self.revoked,
        )

    def __str__(self) -> str:
        return self.client_id or str(self.id)
