from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session
from typing import Callable, List, Optional
import logging

from freshtrack.core.database import Database
from freshtrack.core.flow import Flow
from freshtrack.middleware.transaction_handler import transactional
from freshtrack.models.product import ProductEntity

logger = logging.getLogger(__name__)

PRODUCTS = ProductEntity.__tablename__


def _active():
    return (ProductEntity.is_consumed.is_(False), ProductEntity.is_discarded.is_(False))


class ProductDao:
    """
    Accès au stockage des produits.
    Les requêtes ``get_*`` non suffixées ``_once`` sont vivantes (Flow).
    """

    def __init__(self, database: Database):
        self.database = database

    def get_all_active_products(self) -> Flow[List[ProductEntity]]:
        def fetch(session: Session):
            return session.scalars(
                select(ProductEntity)
                .where(*_active())
                .order_by(ProductEntity.expiry_date.asc())
            ).all()

        return self.database.live_query([PRODUCTS], fetch, name="active_products")

    def get_products_by_category(self, category: str) -> Flow[List[ProductEntity]]:
        def fetch(session: Session):
            return session.scalars(
                select(ProductEntity)
                .where(ProductEntity.category == category, *_active())
                .order_by(ProductEntity.expiry_date.asc())
            ).all()

        return self.database.live_query(
            [PRODUCTS], fetch, name=f"products_by_category[{category}]"
        )

    def get_product_by_id(self, product_id: str) -> Flow[Optional[ProductEntity]]:
        return self.database.live_query(
            [PRODUCTS],
            lambda session: session.get(ProductEntity, product_id),
            name=f"product[{product_id}]",
        )

    async def get_product_by_id_once(self, product_id: str) -> Optional[ProductEntity]:
        return await self.database.run(
            lambda session: session.get(ProductEntity, product_id)
        )

    async def get_product_by_barcode(self, barcode: str) -> Optional[ProductEntity]:
        return await self.database.run(
            lambda session: session.scalars(
                select(ProductEntity).where(ProductEntity.barcode == barcode).limit(1)
            ).first()
        )

    async def get_expiring_products(
        self, threshold_ms: int, current_ms: int
    ) -> List[ProductEntity]:
        """Produits actifs, notifiables, expirant dans [current_ms, threshold_ms]"""

        def fetch(session: Session):
            return session.scalars(
                select(ProductEntity)
                .where(
                    ProductEntity.expiry_date <= threshold_ms,
                    ProductEntity.expiry_date >= current_ms,
                    ProductEntity.notification_enabled.is_(True),
                    *_active(),
                )
                .order_by(ProductEntity.expiry_date.asc())
            ).all()

        return await self.database.run(fetch)

    def get_expired_products(
        self, clock: Callable[[], int]
    ) -> Flow[List[ProductEntity]]:
        """``clock`` est lu à chaque ré-exécution de la requête"""

        def fetch(session: Session):
            return session.scalars(
                select(ProductEntity)
                .where(ProductEntity.expiry_date < clock(), *_active())
                .order_by(ProductEntity.expiry_date.desc())
            ).all()

        return self.database.live_query([PRODUCTS], fetch, name="expired_products")

    def get_active_product_count(self) -> Flow[int]:
        return self.database.live_query(
            [PRODUCTS],
            lambda session: session.scalar(
                select(func.count()).select_from(ProductEntity).where(*_active())
            ),
            name="active_product_count",
        )

    @transactional(PRODUCTS)
    def insert_product(self, session: Session, product: ProductEntity):
        session.merge(product)
        logger.info(f"Product upserted: {product.id} - {product.name}")

    @transactional(PRODUCTS)
    def insert_products(self, session: Session, products: List[ProductEntity]):
        for product in products:
            session.merge(product)
        logger.info(f"{len(products)} product(s) upserted")

    @transactional(PRODUCTS)
    def update_product(self, session: Session, product: ProductEntity) -> bool:
        if session.get(ProductEntity, product.id) is None:
            logger.info(f"Update skipped, product {product.id} not found")
            return False

        session.merge(product)
        logger.info(f"Product updated: {product.id}")
        return True

    @transactional(PRODUCTS)
    def delete_product_by_id(self, session: Session, product_id: str) -> bool:
        result = session.execute(
            delete(ProductEntity).where(ProductEntity.id == product_id)
        )
        logger.info(f"Product deleted: {product_id}")
        return result.rowcount > 0

    @transactional(PRODUCTS)
    def delete_all_products(self, session: Session) -> int:
        result = session.execute(delete(ProductEntity))
        logger.info(f"All products deleted ({result.rowcount})")
        return result.rowcount

    @transactional(PRODUCTS)
    def mark_as_consumed(self, session: Session, product_id: str) -> bool:
        result = session.execute(
            update(ProductEntity)
            .where(ProductEntity.id == product_id)
            .values(is_consumed=True)
        )
        logger.info(f"Product marked as consumed: {product_id}")
        return result.rowcount > 0

    @transactional(PRODUCTS)
    def mark_as_discarded(self, session: Session, product_id: str) -> bool:
        result = session.execute(
            update(ProductEntity)
            .where(ProductEntity.id == product_id)
            .values(is_discarded=True)
        )
        logger.info(f"Product marked as discarded: {product_id}")
        return result.rowcount > 0
