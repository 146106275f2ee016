"""Product validation exceptions.

Raised by ``modules.products.validators`` when a payload does not match the
Product field allow-list.  Both are ``InvalidArgument`` so the views map them
to 400 without special-casing.
"""

from __future__ import annotations

from modules.core.exceptions import InvalidArgument


class UnknownField(InvalidArgument):
    """The payload carries a key outside the Product allow-list."""

    def __init__(self, operation: str, field: str) -> None:
        super().__init__(operation, f"extra field: {field}")
        self.field = field


class MissingField(InvalidArgument):
    """A full-replacement payload lacks one of the Product fields."""

    def __init__(self, operation: str, field: str) -> None:
        super().__init__(operation, f"missing field: {field}")
        self.field = field
