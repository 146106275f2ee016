"""Relational storage for the Product document.

``product_id`` is the business key and carries a UNIQUE index: exclusive
create relies on it instead of a check-then-insert.  The two list fields are
stored as JSON so a row mirrors the wire document one-to-one.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.products.dtos import Product


class ProductRecord(BaseModel):
    """One stored Product.  ``id`` (UUIDv7) orders the collection."""

    product_id = models.TextField(unique=True)
    name = models.TextField(blank=True, default="")
    image_closed = models.TextField(blank=True, default="")
    image_open = models.TextField(blank=True, default="")
    description = models.TextField(blank=True, default="")
    story = models.TextField(blank=True, default="")
    sourcing_values = models.JSONField(default=list, blank=True)
    ingredients = models.JSONField(default=list, blank=True)
    allergy_info = models.TextField(blank=True, default="")
    dietary_certifications = models.TextField(blank=True, default="")

    class Meta:
        db_table = "products"
        ordering = ["id"]

    def to_product(self) -> Product:
        return Product(
            product_id=self.product_id,
            name=self.name,
            image_closed=self.image_closed,
            image_open=self.image_open,
            description=self.description,
            story=self.story,
            sourcing_values=list(self.sourcing_values),
            ingredients=list(self.ingredients),
            allergy_info=self.allergy_info,
            dietary_certifications=self.dietary_certifications,
        )

    def __str__(self) -> str:
        return f"{self.product_id} - {self.name}"
