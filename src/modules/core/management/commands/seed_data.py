from __future__ import annotations

import secrets

from django.core.management.base import BaseCommand

from modules.apikeys.dtos import APIKeyRecord
from modules.core.backends import get_backends
from modules.products.dtos import Product

SEED_PRODUCTS = [
    (
        "001",
        "Vanilla Bean",
        "Madagascar vanilla folded into sweet cream.",
        ["Fairtrade vanilla", "Local dairy"],
        ["cream", "skim milk", "sugar", "vanilla extract", "egg yolks"],
        "Contains milk and egg.",
        "Kosher",
    ),
    (
        "002",
        "Chocolate Fudge Brownie",
        "Chocolate ice cream with fudgy brownie pieces.",
        ["Responsibly sourced cocoa"],
        ["cream", "skim milk", "sugar", "cocoa", "wheat flour", "eggs"],
        "Contains milk, egg and wheat.",
        "",
    ),
    (
        "003",
        "Strawberry Sorbet",
        "Dairy-free sorbet made from ripe strawberries.",
        ["Cage-free eggs", "Non-GMO"],
        ["water", "strawberries", "sugar", "lemon juice"],
        "",
        "Vegan",
    ),
]


class Command(BaseCommand):
    help = "Seed the product store with demo products and a development API key."

    def add_arguments(self, parser):
        parser.add_argument(
            "--api-key",
            default="",
            help="Key to provision (a random one is generated when omitted).",
        )
        parser.add_argument(
            "--client-id",
            default="dev",
            help="Client the provisioned key belongs to.",
        )

    def handle(self, *args, **options):
        backends = get_backends()
        self.stdout.write(
            f"Seeding {backends.settings.store_backend} store..."
        )

        products = self._seed_products(backends.products)
        key = self._seed_api_key(backends.api_keys, options["api_key"], options["client_id"])

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: products={products}, api_key={key}"
            )
        )

    def _seed_products(self, repository) -> int:
        self.stdout.write("Upserting products...")
        for product_id, name, story, sourcing, ingredients, allergy, dietary in SEED_PRODUCTS:
            repository.upsert(
                Product(
                    product_id=product_id,
                    name=name,
                    image_closed=f"/files/{product_id}/closed.png",
                    image_open=f"/files/{product_id}/open.png",
                    description=story,
                    story=story,
                    sourcing_values=sourcing,
                    ingredients=ingredients,
                    allergy_info=allergy,
                    dietary_certifications=dietary,
                )
            )
        return len(SEED_PRODUCTS)

    def _seed_api_key(self, repository, key: str, client_id: str) -> str:
        key = key or secrets.token_urlsafe(32)
        if repository.find(key):
            self.stdout.write("API key already provisioned.")
            return key
        repository.add(APIKeyRecord(key=key, client_id=client_id))
        return key
