from freshtrack.models.product import ProductEntity
from freshtrack.models.category import CategoryEntity, DEFAULT_CATEGORIES

__all__ = [
    "ProductEntity",
    "CategoryEntity",
    "DEFAULT_CATEGORIES",
]
