"""Product service layer (handler contracts).

Turns raw request input into store calls, independent of DRF:

- ``create_product``: full validation, non-empty id, exclusive create.
- ``replace_product``: full validation, id taken from the path, upsert.
- ``patch_product``: loose key/value merge via ``update_partial``.
- ``list_products``: parses and clamps ``limit`` before ``read_many``.

Errors from ``modules.core.exceptions`` propagate unchanged; the view maps
them to status codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import structlog

from modules.core.exceptions import InvalidArgument
from modules.products.validators import validate_full

if TYPE_CHECKING:
    from modules.products.dtos import Product, ProductPage
    from modules.products.repositories.interfaces import IProductRepository


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` and the read limits via constructor
    injection.  ``read_limit_default`` is used when the caller gives no
    limit; ``read_limit_max`` is the ceiling a requested limit is clamped to.
    """

    def __init__(
        self,
        repository: IProductRepository,
        read_limit_default: int = 20,
        read_limit_max: int = 100,
        logger: Optional[Any] = None,
    ) -> None:
        self._repo = repository
        self._read_limit_default = read_limit_default
        self._read_limit_max = read_limit_max
        self._log = logger or structlog.get_logger(__name__)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, payload: Any) -> Product:
        """Validate ``payload`` and create it exclusively.

        Raises:
            InvalidArgument: validation failed or ``productId`` is empty.
            AlreadyExists: the id is already stored.
        """
        product = validate_full(payload, operation="create")
        if not product.product_id:
            raise InvalidArgument("create", "productId must not be empty")
        self._repo.create(product)
        self._log.info("product.create_succeeded", product_id=product.product_id)
        return product

    def replace_product(self, product_id: str, payload: Any) -> Product:
        """Validate ``payload`` and create-or-replace the product at ``product_id``.

        A ``productId`` in the body must equal the path id or be empty.
        """
        product = validate_full(payload, operation="upsert")
        if product.product_id and product.product_id != product_id:
            raise InvalidArgument("upsert", "productId does not match the path")
        product = product.model_copy(update={"product_id": product_id})
        self._repo.upsert(product)
        self._log.info("product.upsert_succeeded", product_id=product_id)
        return product

    def patch_product(self, product_id: str, payload: Any) -> Product:
        """Merge the keys of ``payload`` into the stored product."""
        if not isinstance(payload, dict):
            raise InvalidArgument("update_partial", "payload must be a JSON object")
        if "productId" in payload and payload["productId"] != product_id:
            raise InvalidArgument("update_partial", "productId does not match the path")
        product = self._repo.update_partial(product_id, payload)
        self._log.info(
            "product.update_partial_succeeded",
            product_id=product_id,
            fields=sorted(payload),
        )
        return product

    def delete_product(self, product_id: str) -> None:
        self._repo.delete(product_id)
        self._log.info("product.delete_succeeded", product_id=product_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_product(self, product_id: str) -> Product:
        return self._repo.read(product_id)

    def list_products(self, cursor: Optional[str], limit: Optional[str]) -> ProductPage:
        """Read one page.

        ``limit`` is the raw query value: absent or blank means the default,
        non-numeric or below 1 is ``InvalidArgument``, above the ceiling is
        clamped (and logged).
        """
        return self._repo.read_many(cursor or "", self._resolve_limit(limit))

    def _resolve_limit(self, limit: Optional[str]) -> int:
        if limit is None or limit == "":
            return self._read_limit_default
        try:
            n = int(limit)
        except (TypeError, ValueError) as exc:
            raise InvalidArgument("read_many", f"invalid limit {limit!r}") from exc
        if n < 1:
            raise InvalidArgument("read_many", "limit must be at least 1")
        if n > self._read_limit_max:
            self._log.warning(
                "product.limit_clamped", requested=n, ceiling=self._read_limit_max
            )
            return self._read_limit_max
        return n
