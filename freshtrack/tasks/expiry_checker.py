from typing import Callable, Dict, List, Optional
import logging

from pydantic import BaseModel

from freshtrack.core.config import settings
from freshtrack.domain.product import Product
from freshtrack.repositories.base import ProductRepository
from freshtrack.utils.date_helpers import current_millis, format_millis

logger = logging.getLogger(__name__)


class ExpiryAlert(BaseModel):
    product_id: str
    product_name: str
    days_left: int
    expiry_date: int
    message: str


def build_expiry_message(product: Product, now_ms: int) -> str:
    days_left = product.days_until_expiry(now_ms)

    if days_left == 0:
        return (
            f"{product.name} expires TODAY! "
            f"Quantity: {product.quantity}. Use it quickly."
        )

    return (
        f"{product.name} expires in {days_left} day(s) "
        f"({format_millis(product.expiry_date)}). "
        f"Quantity: {product.quantity}."
    )


async def check_expiring_products(
    product_repository: ProductRepository,
    days_threshold: Optional[int] = None,
    clock: Callable[[], int] = current_millis,
) -> List[ExpiryAlert]:
    """
    Construit une alerte par produit notifiable expirant dans la fenêtre.
    La livraison (push, e-mail...) n'est pas gérée ici : les alertes sont
    journalisées et retournées à l'appelant.
    """
    if days_threshold is None:
        days_threshold = settings.NOTIFICATION_DAYS_IN_ADVANCE

    logger.info(f"Checking products expiring within {days_threshold} day(s)...")

    products = await product_repository.get_expiring_products(days_threshold)
    now = clock()

    alerts = [
        ExpiryAlert(
            product_id=product.id,
            product_name=product.name,
            days_left=product.days_until_expiry(now),
            expiry_date=product.expiry_date,
            message=build_expiry_message(product, now),
        )
        for product in products
    ]

    for alert in alerts:
        logger.info(f"Expiry alert: {alert.message}")

    logger.info(f"Expiry check completed. {len(alerts)} alert(s)")
    return alerts


async def send_daily_reminder(
    product_repository: ProductRepository,
    clock: Callable[[], int] = current_millis,
) -> Dict[str, int]:
    now = clock()

    expiring = await product_repository.get_expiring_products(
        settings.NOTIFICATION_DAYS_IN_ADVANCE
    )
    expired = await product_repository.get_expired_products().first()
    expiring_today = [p for p in expiring if p.days_until_expiry(now) == 0]

    summary = {
        "expiring_soon": len(expiring),
        "expiring_today": len(expiring_today),
        "expired": len(expired),
    }

    logger.info(
        f"Daily reminder: "
        f"{summary['expiring_today']} expiring today, "
        f"{summary['expiring_soon']} expiring soon, "
        f"{summary['expired']} expired"
    )
    return summary
