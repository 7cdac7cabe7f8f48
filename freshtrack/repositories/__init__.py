from freshtrack.repositories.base import ProductRepository, CategoryRepository
from freshtrack.repositories.sql import SqlProductRepository, SqlCategoryRepository
from freshtrack.repositories.in_memory import (
    InMemoryProductRepository,
    InMemoryCategoryRepository,
)

__all__ = [
    "ProductRepository",
    "CategoryRepository",
    "SqlProductRepository",
    "SqlCategoryRepository",
    "InMemoryProductRepository",
    "InMemoryCategoryRepository",
]
