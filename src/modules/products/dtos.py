"""Product DTOs shared by the store adapters, the service and the views.

Framework-agnostic data transfer objects using Pydantic v2.  DTOs are
immutable (``frozen=True``).

- ``Product``: one catalog entry.  ``product_id`` travels as ``productId``
  on the wire and in MongoDB documents; every other field keeps its name.
- ``ProductPage``: a slice of the collection plus the cursor that resumes it.
"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """Immutable Product value.

    ``product_id`` is the business key and is distinct from whatever
    identifier the backing store assigns to the record.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: str = Field(alias="productId")
    name: str
    image_closed: str
    image_open: str
    description: str
    story: str
    sourcing_values: List[str]
    ingredients: List[str]
    allergy_info: str
    dietary_certifications: str

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict keyed by wire names."""
        return self.model_dump(by_alias=True)

    def field_values(self) -> Dict[str, Any]:
        """Dict keyed by attribute names, used by the ORM adapter."""
        return self.model_dump()


# Wire name -> attribute name, e.g. ``{"productId": "product_id", "name": "name"}``.
WIRE_TO_ATTR: Dict[str, str] = {
    (field.alias or name): name for name, field in Product.model_fields.items()
}
ATTR_TO_WIRE: Dict[str, str] = {attr: wire for wire, attr in WIRE_TO_ATTR.items()}

PRODUCT_FIELDS = frozenset(WIRE_TO_ATTR)


class ProductPage(BaseModel):
    """A page of products.

    ``cursor`` is the storage identifier of the last product on the page;
    feed it back to ``read_many`` to fetch the next page.
    """

    model_config = ConfigDict(frozen=True)

    cursor: str = ""
    products: List[Product] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"products": [p.to_wire() for p in self.products]}
        if self.cursor:
            body = {"cursor": self.cursor, **body}
        return body
