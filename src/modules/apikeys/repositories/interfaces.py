"""API key repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from modules.apikeys.dtos import APIKeyRecord


class IAPIKeyRepository(ABC):
    """Lookup contract for API keys.

    ``find`` returns every record carrying ``key`` so the caller can tell
    "unknown" from "duplicated".  Backend errors surface as ``StorageFailure``.
    """

    @abstractmethod
    def find(self, key: str) -> List[APIKeyRecord]:
        """Return all records whose key equals ``key``."""

    @abstractmethod
    def add(self, record: APIKeyRecord) -> None:
        """Store a new key (provisioning only; no uniqueness check)."""
