from freshtrack.domain.product import (
    Product,
    Category,
    ExpiryUrgency,
    ProductFilter,
    ProductSort,
    urgency_for_days,
    product_to_domain,
    product_to_entity,
    category_to_domain,
    category_to_entity,
)

__all__ = [
    "Product",
    "Category",
    "ExpiryUrgency",
    "ProductFilter",
    "ProductSort",
    "urgency_for_days",
    "product_to_domain",
    "product_to_entity",
    "category_to_domain",
    "category_to_entity",
]
