from freshtrack.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from freshtrack.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from freshtrack.schemas.dashboard import DashboardSummary

__all__ = [
    "ProductCreate",
    "ProductUpdate",
    "ProductResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "DashboardSummary",
]
