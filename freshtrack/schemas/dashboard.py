from pydantic import BaseModel, ConfigDict
from typing import List

from freshtrack.domain.product import Product


class DashboardSummary(BaseModel):
    """
    Vue tableau de bord. Les listes peuvent se recouper
    (un produit peut être à la fois "aujourd'hui" et "critique").
    """

    model_config = ConfigDict(frozen=True)

    total_active_products: int = 0
    expiring_today: List[Product] = []
    expiring_this_week: List[Product] = []
    expired_products: List[Product] = []
    critical_items: List[Product] = []
