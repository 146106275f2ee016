"""MongoDB implementation of the Product repository.

Documents live in the ``products`` collection keyed by ``productId`` and use
the wire field names.  The collection carries no unique index on
``productId``, so:

- ``create`` is an upsert with ``$setOnInsert`` only: a matched document means
  the key already existed and nothing was written.
- ``read`` and ``read_many`` refuse to pick one of several documents sharing a
  ``productId`` and raise ``Inconsistent`` instead.
- ``update``, ``update_partial`` and ``upsert`` look the key up first and
  write nothing when it is missing (updates only) or duplicated.

The ``ObjectId`` of the last document on a page is the pagination cursor.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import structlog
from bson import ObjectId
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from modules.core.exceptions import (
    AlreadyExists,
    Inconsistent,
    InvalidArgument,
    NotFound,
    StorageFailure,
)
from modules.products.dtos import ATTR_TO_WIRE, PRODUCT_FIELDS, Product, ProductPage
from modules.products.repositories.interfaces import IProductRepository
from modules.products.validators import require_product_id, validate_partial

PRODUCTS_COLLECTION = "products"


def _to_document(product: Product) -> Dict[str, Any]:
    return product.to_wire()


def _to_product(document: Mapping[str, Any]) -> Product:
    return Product.model_validate({k: v for k, v in document.items() if k in PRODUCT_FIELDS})


class ProductMongoRepository(IProductRepository):
    """Concrete Product repository backed by a pymongo ``Database``."""

    def __init__(self, database, logger: Optional[Any] = None) -> None:
        self._collection = database[PRODUCTS_COLLECTION]
        self._client = database.client
        self._log = logger or structlog.get_logger(__name__)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(self, product: Product) -> None:
        require_product_id("create", product.product_id)
        log = self._log.bind(product_id=product.product_id)
        try:
            result = self._collection.update_one(
                {"productId": product.product_id},
                {"$setOnInsert": _to_document(product)},
                upsert=True,
            )
        except PyMongoError as exc:
            log.error("product.create_failed", error=str(exc))
            raise StorageFailure("create", str(exc)) from exc
        # Matched means the document existed and $setOnInsert was a no-op.
        if result.matched_count:
            log.error("product.create_conflict")
            raise AlreadyExists(
                "create", f"product {product.product_id!r} already exists"
            )
        log.debug("product.created", record_id=str(result.upserted_id))

    def _single_record_id(self, operation: str, product_id: str, log) -> ObjectId:
        """``_id`` of the one document with ``product_id``; nothing is written here."""
        try:
            documents = list(
                self._collection.find({"productId": product_id}, {"_id": 1}).limit(2)
            )
        except PyMongoError as exc:
            log.error(f"product.{operation}_failed", error=str(exc))
            raise StorageFailure(operation, str(exc)) from exc
        if not documents:
            log.warning(f"product.{operation}_missing")
            raise NotFound(operation, f"product {product_id!r} not found")
        if len(documents) > 1:
            log.error(f"product.{operation}_inconsistent")
            raise Inconsistent(operation, f"more than one product {product_id!r}")
        return documents[0]["_id"]

    def update(self, product: Product) -> None:
        require_product_id("update", product.product_id)
        log = self._log.bind(product_id=product.product_id)
        record_id = self._single_record_id("update", product.product_id, log)
        try:
            result = self._collection.replace_one({"_id": record_id}, _to_document(product))
        except PyMongoError as exc:
            log.error("product.update_failed", error=str(exc))
            raise StorageFailure("update", str(exc)) from exc
        if result.matched_count == 0:
            # Deleted between the lookup and the write.
            log.warning("product.update_missing")
            raise NotFound("update", f"product {product.product_id!r} not found")
        log.debug("product.updated", operation="update")

    def update_partial(self, product_id: str, kvs: Mapping[str, Any]) -> Product:
        changes = validate_partial(product_id, kvs)
        log = self._log.bind(product_id=product_id)
        document = {ATTR_TO_WIRE[attr]: value for attr, value in changes.items()}
        record_id = self._single_record_id("update_partial", product_id, log)
        if document:
            try:
                matched = self._collection.update_one(
                    {"_id": record_id}, {"$set": document}
                ).matched_count
            except PyMongoError as exc:
                log.error("product.update_partial_failed", error=str(exc))
                raise StorageFailure("update_partial", str(exc)) from exc
            if matched == 0:
                log.warning("product.update_partial_missing")
                raise NotFound("update_partial", f"product {product_id!r} not found")
        log.debug("product.updated", operation="update_partial", fields=sorted(document))
        return self.read(product_id)

    def upsert(self, product: Product) -> None:
        require_product_id("upsert", product.product_id)
        log = self._log.bind(product_id=product.product_id)
        try:
            existing = list(
                self._collection.find({"productId": product.product_id}, {"_id": 1}).limit(2)
            )
            if len(existing) > 1:
                log.error("product.upsert_inconsistent")
                raise Inconsistent("upsert", f"more than one product {product.product_id!r}")
            result = self._collection.replace_one(
                {"productId": product.product_id}, _to_document(product), upsert=True
            )
        except PyMongoError as exc:
            log.error("product.upsert_failed", error=str(exc))
            raise StorageFailure("upsert", str(exc)) from exc
        log.debug("product.upserted", created=result.upserted_id is not None)

    def delete(self, product_id: str) -> None:
        require_product_id("delete", product_id)
        log = self._log.bind(product_id=product_id)
        try:
            result = self._collection.delete_many({"productId": product_id})
        except PyMongoError as exc:
            log.error("product.delete_failed", error=str(exc))
            raise StorageFailure("delete", str(exc)) from exc
        log.debug("product.deleted", count=result.deleted_count)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def read(self, product_id: str) -> Product:
        require_product_id("read", product_id)
        log = self._log.bind(product_id=product_id)
        try:
            documents = list(self._collection.find({"productId": product_id}).limit(2))
        except PyMongoError as exc:
            log.error("product.read_failed", error=str(exc))
            raise StorageFailure("read", str(exc)) from exc
        if not documents:
            raise NotFound("read", f"product {product_id!r} not found")
        if len(documents) > 1:
            # Most likely a duplicate was inserted out-of-band.
            log.error("product.read_inconsistent")
            raise Inconsistent("read", f"more than one product {product_id!r}")
        log.debug("product.read", record_id=str(documents[0]["_id"]))
        return _to_product(documents[0])

    def read_many(self, cursor: str, limit: int) -> ProductPage:
        if limit < 1:
            raise InvalidArgument("read_many", "limit must be at least 1")
        selector: Dict[str, Any] = {}
        if cursor:
            if not ObjectId.is_valid(cursor):
                raise InvalidArgument("read_many", f"invalid cursor {cursor!r}")
            selector = {"_id": {"$gt": ObjectId(cursor)}}
        try:
            documents = list(
                self._collection.find(selector).sort("_id", ASCENDING).limit(limit)
            )
        except PyMongoError as exc:
            self._log.error("product.read_many_failed", cursor=cursor, error=str(exc))
            raise StorageFailure("read_many", str(exc)) from exc
        if not documents:
            raise NotFound("read_many", "no products after cursor")

        seen = set()
        for document in documents:
            product_id = document.get("productId")
            if product_id in seen:
                self._log.error("product.read_many_inconsistent", product_id=product_id)
                raise Inconsistent("read_many", f"more than one product {product_id!r}")
            seen.add(product_id)

        page = ProductPage(
            cursor=str(documents[-1]["_id"]),
            products=[_to_product(document) for document in documents],
        )
        self._log.debug(
            "product.read_many", count=len(documents), start=cursor, end=page.cursor
        )
        return page

    def ping(self) -> None:
        try:
            self._client.admin.command("ping")
        except PyMongoError as exc:
            raise StorageFailure("ping", str(exc)) from exc

    def close(self) -> None:
        self._client.close()
