"""MongoDB implementation of the API key repository.

Keys live in the ``apikeys`` collection under the ``apikey`` field.
"""

from __future__ import annotations

from typing import Any, List, Optional

import structlog
from pymongo.errors import PyMongoError

from modules.apikeys.dtos import APIKeyRecord
from modules.apikeys.repositories.interfaces import IAPIKeyRepository
from modules.core.exceptions import StorageFailure

APIKEYS_COLLECTION = "apikeys"


class APIKeyMongoRepository(IAPIKeyRepository):
    def __init__(self, database, logger: Optional[Any] = None) -> None:
        self._collection = database[APIKEYS_COLLECTION]
        self._log = logger or structlog.get_logger(__name__)

    def find(self, key: str) -> List[APIKeyRecord]:
        try:
            documents = list(self._collection.find({"apikey": key}))
        except PyMongoError as exc:
            self._log.error("apikey.find_failed", error=str(exc))
            raise StorageFailure("authenticate", str(exc)) from exc
        return [
            APIKeyRecord(
                key=document["apikey"],
                client_id=document.get("client_id", ""),
                expiry=document.get("expiry"),
                revoked=document.get("revoked", False),
            )
            for document in documents
        ]

    def add(self, record: APIKeyRecord) -> None:
        document = {
            "apikey": record.key,
            "client_id": record.client_id,
            "expiry": record.expiry,
            "revoked": record.revoked,
        }
        try:
            result = self._collection.insert_one(document)
        except PyMongoError as exc:
            self._log.error("apikey.add_failed", client_id=record.client_id, error=str(exc))
            raise StorageFailure("add_api_key", str(exc)) from exc
        self._log.info(
            "apikey.added", client_id=record.client_id, record_id=str(result.inserted_id)
        )
