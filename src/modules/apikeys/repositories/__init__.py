"""API key repositories package."""

from modules.apikeys.repositories.django_repository import APIKeyDjangoRepository
from modules.apikeys.repositories.interfaces import IAPIKeyRepository
from modules.apikeys.repositories.mongo_repository import APIKeyMongoRepository

__all__ = ["APIKeyDjangoRepository", "APIKeyMongoRepository", "IAPIKeyRepository"]
