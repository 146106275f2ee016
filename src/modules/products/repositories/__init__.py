"""Product repositories package."""

from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.repositories.interfaces import IProductRepository
from modules.products.repositories.mongo_repository import ProductMongoRepository

__all__ = ["IProductRepository", "ProductDjangoRepository", "ProductMongoRepository"]
