"""Product repository interface.

The store is consumed as a capability set; each backing technology gets one
concrete adapter.  Every method raises from ``modules.core.exceptions``:

- ``InvalidArgument`` for an empty id, bad limit, malformed cursor or a
  partial update that fails validation.
- ``NotFound`` when a read window is empty or an update matched nothing.
- ``AlreadyExists`` when ``create`` hits an existing ``product_id``.
- ``Inconsistent`` when more than one record shares a ``product_id``.
- ``StorageFailure`` for any other backend error.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from modules.products.dtos import Product, ProductPage


class IProductRepository(ABC):
    """Repository contract for the Product collection, keyed by ``product_id``."""

    @abstractmethod
    def create(self, product: Product) -> None:
        """Exclusively insert ``product``; fail if its id is already stored."""

    @abstractmethod
    def read(self, product_id: str) -> Product:
        """Return the single record with ``product_id``."""

    @abstractmethod
    def read_many(self, cursor: str, limit: int) -> ProductPage:
        """Return up to ``limit`` records stored strictly after ``cursor``.

        An empty ``cursor`` starts from the first record.  The page's own
        cursor is the storage id of its last record.
        """

    @abstractmethod
    def update(self, product: Product) -> None:
        """Fully replace an existing record."""

    @abstractmethod
    def update_partial(self, product_id: str, kvs: Mapping[str, Any]) -> Product:
        """Merge the wire-named ``kvs`` into an existing record and return it."""

    @abstractmethod
    def upsert(self, product: Product) -> None:
        """Insert ``product`` or fully replace the record with its id."""

    @abstractmethod
    def delete(self, product_id: str) -> None:
        """Remove the record if present.  Deleting a missing id is not an error."""

    @abstractmethod
    def ping(self) -> None:
        """Raise ``StorageFailure`` when the backend cannot be reached."""

    def close(self) -> None:
        """Release backend resources.  No-op by default."""
