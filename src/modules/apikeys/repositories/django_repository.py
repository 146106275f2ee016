"""Django ORM implementation of the API key repository."""

from __future__ import annotations

from typing import Any, List, Optional

import structlog
from django.db import DatabaseError

from modules.apikeys.dtos import APIKeyRecord
from modules.apikeys.models import APIKey
from modules.apikeys.repositories.interfaces import IAPIKeyRepository
from modules.core.exceptions import StorageFailure


class APIKeyDjangoRepository(IAPIKeyRepository):
    def __init__(self, using: str = "default", logger: Optional[Any] = None) -> None:
        self._using = using
        self._log = logger or structlog.get_logger(__name__)

    def find(self, key: str) -> List[APIKeyRecord]:
        try:
            rows = list(APIKey.objects.using(self._using).filter(key=key))
        except DatabaseError as exc:
            self._log.error("apikey.find_failed", error=str(exc))
            raise StorageFailure("authenticate", str(exc)) from exc
        return [row.to_record() for row in rows]

    def add(self, record: APIKeyRecord) -> None:
        try:
            row = APIKey.objects.using(self._using).create(**record.model_dump())
        except DatabaseError as exc:
            self._log.error("apikey.add_failed", client_id=record.client_id, error=str(exc))
            raise StorageFailure("add_api_key", str(exc)) from exc
        self._log.info("apikey.added", client_id=record.client_id, record_id=str(row.id))
