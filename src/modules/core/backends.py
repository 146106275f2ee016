"""Backend wiring.

``CatalogSettings`` is the frozen slice of Django settings the catalog needs.
``build_backends`` turns it into concrete repositories and the API key
authenticator once, at startup (``CoreConfig.ready``).  Views and the DRF
authentication class fetch that bundle with ``get_backends()`` and pass its
parts down by constructor; nothing below this module reads settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional

import structlog
from django.apps import apps
from pydantic import BaseModel, ConfigDict, model_validator

from modules.apikeys.repositories import (
    APIKeyDjangoRepository,
    APIKeyMongoRepository,
    IAPIKeyRepository,
)
from modules.apikeys.services import APIKeyAuthenticator, reject_expired_or_revoked
from modules.core.mongo import create_mongo_database
from modules.products.repositories import (
    IProductRepository,
    ProductDjangoRepository,
    ProductMongoRepository,
)

logger = structlog.get_logger(__name__)


class CatalogSettings(BaseModel):
    """Configuration handed to ``build_backends``."""

    model_config = ConfigDict(frozen=True)

    store_backend: Literal["django", "mongodb"] = "django"
    mongodb_url: str = ""
    mongodb_database: str = "icecream"
    read_limit_default: int = 20
    read_limit_max: int = 100
    enforce_key_policy: bool = False

    @model_validator(mode="after")
    def _check_limits(self) -> CatalogSettings:
        if self.read_limit_default < 1 or self.read_limit_max < 1:
            raise ValueError("read limits must be at least 1")
        if self.read_limit_default > self.read_limit_max:
            raise ValueError("PRODUCT_READ_LIMIT_DEFAULT exceeds PRODUCT_READ_LIMIT_MAX")
        if self.store_backend == "mongodb" and not self.mongodb_url:
            raise ValueError("MONGODB_URL is required for the mongodb backend")
        return self

    @classmethod
    def from_django(cls, settings: Any) -> CatalogSettings:
        return cls(
            store_backend=settings.PRODUCT_STORE_BACKEND,
            mongodb_url=settings.MONGODB_URL,
            mongodb_database=settings.MONGODB_DATABASE,
            read_limit_default=settings.PRODUCT_READ_LIMIT_DEFAULT,
            read_limit_max=settings.PRODUCT_READ_LIMIT_MAX,
            enforce_key_policy=settings.APIKEY_ENFORCE_POLICY,
        )


@dataclass(frozen=True)
class Backends:
    settings: CatalogSettings
    products: IProductRepository
    api_keys: IAPIKeyRepository
    authenticator: APIKeyAuthenticator

    def close(self) -> None:
        self.products.close()


def build_backends(
    config: CatalogSettings,
    database: Optional[Any] = None,
    log: Optional[Any] = None,
) -> Backends:
    """Construct the repositories for ``config.store_backend``.

    ``database`` overrides the MongoDB database (tests pass a mongomock one).
    """
    log = log or logger
    if config.store_backend == "mongodb":
        if database is None:
            database = create_mongo_database(config.mongodb_url, config.mongodb_database)
        products: IProductRepository = ProductMongoRepository(
            database, logger=log.bind(store="mongodb")
        )
        api_keys: IAPIKeyRepository = APIKeyMongoRepository(
            database, logger=log.bind(store="mongodb")
        )
    else:
        products = ProductDjangoRepository(logger=log.bind(store="django"))
        api_keys = APIKeyDjangoRepository(logger=log.bind(store="django"))

    policy = reject_expired_or_revoked if config.enforce_key_policy else None
    authenticator = APIKeyAuthenticator(api_keys, policy=policy, logger=log)
    log.info("backends.ready", store=config.store_backend)
    return Backends(
        settings=config,
        products=products,
        api_keys=api_keys,
        authenticator=authenticator,
    )


def get_backends() -> Backends:
    """The bundle built by ``CoreConfig.ready``."""
    return apps.get_app_config("core").backends
