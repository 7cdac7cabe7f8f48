from typing import Callable, List, Optional

from freshtrack.core.flow import Flow, combine
from freshtrack.domain.product import ExpiryUrgency, Product
from freshtrack.repositories.base import ProductRepository
from freshtrack.schemas.dashboard import DashboardSummary
from freshtrack.utils.date_helpers import current_millis


def summarize(
    all_products: List[Product],
    expired_products: List[Product],
    active_count: int,
    now_ms: Optional[int] = None,
) -> DashboardSummary:
    now = current_millis() if now_ms is None else now_ms

    return DashboardSummary(
        total_active_products=active_count,
        expiring_today=[p for p in all_products if p.days_until_expiry(now) == 0],
        expiring_this_week=[
            p for p in all_products if 1 <= p.days_until_expiry(now) <= 7
        ],
        expired_products=expired_products,
        critical_items=[
            p for p in all_products if p.get_urgency(now) == ExpiryUrgency.CRITICAL
        ],
    )


class DashboardService:
    """Agrégation des flux produits pour le tableau de bord"""

    def __init__(
        self,
        product_repository: ProductRepository,
        clock: Callable[[], int] = current_millis,
    ):
        self.product_repository = product_repository
        self.clock = clock

    @property
    def summary(self) -> Flow[DashboardSummary]:
        return combine(
            self.product_repository.get_all_products(),
            self.product_repository.get_expired_products(),
            self.product_repository.get_active_product_count(),
            transform=lambda products, expired, count: summarize(
                products, expired, count, self.clock()
            ),
        )

    async def mark_as_consumed(self, product_id: str):
        await self.product_repository.mark_as_consumed(product_id)

    async def mark_as_discarded(self, product_id: str):
        await self.product_repository.mark_as_discarded(product_id)
