"""Catalog error taxonomy.

Raised by the store adapters, the validators and the API key authenticator.
The API layer (Views) catches these and translates them into HTTP status
codes; nothing here is retried.

- ``InvalidArgument``: malformed or missing caller input (400).
- ``NotFound``: no matching record (404 on reads).
- ``AlreadyExists``: exclusive insert hit an existing key (403).
- ``Inconsistent``: a storage invariant was violated, e.g. two records share
  one business key.  Never repaired silently.
- ``StorageFailure``: any other driver / database error.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class carrying the operation that failed."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class InvalidArgument(CatalogError):
    """The caller supplied an empty id, a bad limit or a malformed payload."""


class NotFound(CatalogError):
    """No record matched."""


class AlreadyExists(CatalogError):
    """A record with the same business key already exists."""


class Inconsistent(CatalogError):
    """More than one record shares a key that must be unique."""


class StorageFailure(CatalogError):
    """The backing store raised an error unrelated to the caller's input."""
