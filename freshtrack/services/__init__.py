"""
Business logic services
"""

from freshtrack.services.product_list_service import (
    ProductListService,
    apply_filter_and_sort,
)
from freshtrack.services.dashboard_service import DashboardService, summarize
from freshtrack.services.product_editor import ProductEditor, ProductFormState
from freshtrack.services.product_details_service import ProductDetailsService

__all__ = [
    "ProductListService",
    "apply_filter_and_sort",
    "DashboardService",
    "summarize",
    "ProductEditor",
    "ProductFormState",
    "ProductDetailsService",
]
