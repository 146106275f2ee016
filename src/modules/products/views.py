"""Product API views.

Exposes the ``ProductService`` via HTTP using a DRF ViewSet.
Domain exceptions are caught and translated into status codes:

- reads: ``InvalidArgument`` 400, ``NotFound`` 404, ``Inconsistent`` and
  ``StorageFailure`` 500;
- writes: ``InvalidArgument`` 400, any other store failure 403.

Error bodies are ``{"detail": ..., "operation": ...}``.
"""

from __future__ import annotations

from typing import Dict, Type

import structlog
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.core.backends import get_backends
from modules.core.exceptions import (
    AlreadyExists,
    CatalogError,
    Inconsistent,
    InvalidArgument,
    NotFound,
    StorageFailure,
)
from modules.products.services import ProductService

logger = structlog.get_logger(__name__)

READ_STATUS: Dict[Type[CatalogError], int] = {
    InvalidArgument: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    Inconsistent: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StorageFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

WRITE_STATUS: Dict[Type[CatalogError], int] = {
    InvalidArgument: status.HTTP_400_BAD_REQUEST,
    AlreadyExists: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_403_FORBIDDEN,
    Inconsistent: status.HTTP_403_FORBIDDEN,
    StorageFailure: status.HTTP_403_FORBIDDEN,
}


def _error_response(exc: CatalogError, table: Dict[Type[CatalogError], int]) -> Response:
    code = status.HTTP_500_INTERNAL_SERVER_ERROR
    for klass in type(exc).__mro__:
        if klass in table:
            code = table[klass]
            break
    if isinstance(exc, Inconsistent):
        logger.error("product.inconsistent", operation=exc.operation, detail=exc.message)
    return Response({"detail": exc.message, "operation": exc.operation}, status=code)


class ProductViewSet(ViewSet):
    """ViewSet for Product CRUD operations.

    Routes (``trailing_slash=False``)::

        GET    /products            list
        POST   /products            create
        GET    /products/{pk}       retrieve
        PUT    /products/{pk}       update   (upsert)
        PATCH  /products/{pk}       partial_update
        DELETE /products/{pk}       destroy
    """

    lookup_value_regex = "[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        backends = get_backends()
        self._service = ProductService(
            repository=backends.products,
            read_limit_default=backends.settings.read_limit_default,
            read_limit_max=backends.settings.read_limit_max,
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /products?cursor=&limit="""
        try:
            page = self._service.list_products(
                request.query_params.get("cursor"),
                request.query_params.get("limit"),
            )
        except CatalogError as exc:
            return _error_response(exc, READ_STATUS)
        return Response(page.to_wire())

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /products/{pk}"""
        try:
            product = self._service.get_product(pk or "")
        except CatalogError as exc:
            return _error_response(exc, READ_STATUS)
        return Response(product.to_wire())

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /products"""
        try:
            product = self._service.create_product(request.data)
        except CatalogError as exc:
            return _error_response(exc, WRITE_STATUS)
        return Response(product.to_wire(), status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /products/{pk}"""
        try:
            product = self._service.replace_product(pk or "", request.data)
        except CatalogError as exc:
            return _error_response(exc, WRITE_STATUS)
        return Response(product.to_wire(), status=status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /products/{pk}"""
        try:
            product = self._service.patch_product(pk or "", request.data)
        except CatalogError as exc:
            return _error_response(exc, WRITE_STATUS)
        return Response(product.to_wire())

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /products/{pk}"""
        try:
            self._service.delete_product(pk or "")
        except CatalogError as exc:
            return _error_response(exc, WRITE_STATUS)
        return Response(status=status.HTTP_200_OK)
