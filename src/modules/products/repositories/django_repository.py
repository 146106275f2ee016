"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.  Exclusive
create is delegated to the UNIQUE index on ``product_id``: the insert runs in
its own savepoint and an ``IntegrityError`` means the key already exists.
Updates check the number of matched rows so a missing record is reported
instead of silently ignored.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional
from uuid import UUID

import structlog
from django.db import DatabaseError, IntegrityError, connections, transaction
from django.utils import timezone

from modules.core.exceptions import (
    AlreadyExists,
    Inconsistent,
    InvalidArgument,
    NotFound,
    StorageFailure,
)
from modules.products.dtos import Product, ProductPage
from modules.products.models import ProductRecord
from modules.products.repositories.interfaces import IProductRepository
from modules.products.validators import require_product_id, validate_partial


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def __init__(self, using: str = "default", logger: Optional[Any] = None) -> None:
        self._using = using
        self._log = logger or structlog.get_logger(__name__)

    @property
    def _records(self):
        return ProductRecord.objects.using(self._using)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create(self, product: Product) -> None:
        require_product_id("create", product.product_id)
        log = self._log.bind(product_id=product.product_id)
        try:
            with transaction.atomic(using=self._using):
                record = self._records.create(**product.field_values())
        except IntegrityError as exc:
            log.error("product.create_conflict")
            raise AlreadyExists(
                "create", f"product {product.product_id!r} already exists"
            ) from exc
        except DatabaseError as exc:
            log.error("product.create_failed", error=str(exc))
            raise StorageFailure("create", str(exc)) from exc
        log.debug("product.created", record_id=str(record.id))

    def update(self, product: Product) -> None:
        require_product_id("update", product.product_id)
        fields = product.field_values()
        fields.pop("product_id")
        self._apply("update", product.product_id, fields)

    def update_partial(self, product_id: str, kvs: Mapping[str, Any]) -> Product:
        changes = validate_partial(product_id, kvs)
        self._apply("update_partial", product_id, changes)
        return self.read(product_id)

    def upsert(self, product: Product) -> None:
        require_product_id("upsert", product.product_id)
        fields = product.field_values()
        fields.pop("product_id")
        log = self._log.bind(product_id=product.product_id)
        try:
            with transaction.atomic(using=self._using):
                _, created = self._records.update_or_create(
                    product_id=product.product_id, defaults=fields
                )
        except DatabaseError as exc:
            log.error("product.upsert_failed", error=str(exc))
            raise StorageFailure("upsert", str(exc)) from exc
        log.debug("product.upserted", created=created)

    def delete(self, product_id: str) -> None:
        require_product_id("delete", product_id)
        log = self._log.bind(product_id=product_id)
        try:
            count, _ = self._records.filter(product_id=product_id).delete()
        except DatabaseError as exc:
            log.error("product.delete_failed", error=str(exc))
            raise StorageFailure("delete", str(exc)) from exc
        log.debug("product.deleted", count=count)

    def _apply(self, operation: str, product_id: str, fields: dict) -> None:
        """Run an UPDATE and fail with ``NotFound`` when no row matched.

        More than one matched row rolls the UPDATE back before raising.
        """
        log = self._log.bind(product_id=product_id)
        try:
            with transaction.atomic(using=self._using):
                matched = self._records.filter(product_id=product_id).update(
                    updated_at=timezone.now(), **fields
                )
                if matched > 1:
                    log.error(f"product.{operation}_inconsistent", matched=matched)
                    raise Inconsistent(
                        operation, f"{matched} products share {product_id!r}"
                    )
        except DatabaseError as exc:
            log.error(f"product.{operation}_failed", error=str(exc))
            raise StorageFailure(operation, str(exc)) from exc
        if matched == 0:
            log.warning(f"product.{operation}_missing")
            raise NotFound(operation, f"product {product_id!r} not found")
        log.debug("product.updated", operation=operation, fields=sorted(fields))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def read(self, product_id: str) -> Product:
        require_product_id("read", product_id)
        log = self._log.bind(product_id=product_id)
        try:
            records = list(self._records.filter(product_id=product_id)[:2])
        except DatabaseError as exc:
            log.error("product.read_failed", error=str(exc))
            raise StorageFailure("read", str(exc)) from exc
        if not records:
            raise NotFound("read", f"product {product_id!r} not found")
        if len(records) > 1:
            # Only reachable if a duplicate bypassed the unique index.
            log.error("product.read_inconsistent")
            raise Inconsistent("read", f"more than one product {product_id!r}")
        log.debug("product.read", record_id=str(records[0].id))
        return records[0].to_product()

    def read_many(self, cursor: str, limit: int) -> ProductPage:
        if limit < 1:
            raise InvalidArgument("read_many", "limit must be at least 1")
        queryset = self._records.order_by("id")
        if cursor:
            try:
                after = UUID(cursor)
            except ValueError as exc:
                raise InvalidArgument("read_many", f"invalid cursor {cursor!r}") from exc
            queryset = queryset.filter(id__gt=after)
        try:
            records = list(queryset[:limit])
        except DatabaseError as exc:
            self._log.error("product.read_many_failed", cursor=cursor, error=str(exc))
            raise StorageFailure("read_many", str(exc)) from exc
        if not records:
            raise NotFound("read_many", "no products after cursor")

        seen = set()
        for record in records:
            if record.product_id in seen:
                self._log.error("product.read_many_inconsistent", product_id=record.product_id)
                raise Inconsistent(
                    "read_many", f"more than one product {record.product_id!r}"
                )
            seen.add(record.product_id)

        page = ProductPage(
            cursor=records[-1].id.hex,
            products=[record.to_product() for record in records],
        )
        self._log.debug(
            "product.read_many", count=len(records), start=cursor, end=page.cursor
        )
        return page

    def ping(self) -> None:
        try:
            connection = connections[self._using]
            connection.ensure_connection()
            with connection.cursor() as db_cursor:
                db_cursor.execute("SELECT 1")
                db_cursor.fetchone()
        except DatabaseError as exc:
            raise StorageFailure("ping", str(exc)) from exc
