from typing import Callable, List, Optional
import logging

from freshtrack.core.flow import Flow
from freshtrack.dao.category_dao import CategoryDao
from freshtrack.dao.product_dao import ProductDao
from freshtrack.domain.product import (
    Category,
    Product,
    category_to_domain,
    category_to_entity,
    product_to_domain,
    product_to_entity,
)
from freshtrack.repositories.base import CategoryRepository, ProductRepository
from freshtrack.utils.date_helpers import current_millis, days_to_millis

logger = logging.getLogger(__name__)


def _products(entities) -> List[Product]:
    return [product_to_domain(entity) for entity in entities]


def _optional_product(entity) -> Optional[Product]:
    return product_to_domain(entity) if entity is not None else None


class SqlProductRepository(ProductRepository):
    def __init__(self, dao: ProductDao, clock: Callable[[], int] = current_millis):
        self.dao = dao
        self.clock = clock

    def get_all_products(self) -> Flow[List[Product]]:
        return self.dao.get_all_active_products().map(_products).distinct_until_changed()

    def get_products_by_category(self, category: str) -> Flow[List[Product]]:
        return (
            self.dao.get_products_by_category(category)
            .map(_products)
            .distinct_until_changed()
        )

    def get_product_by_id(self, product_id: str) -> Flow[Optional[Product]]:
        return (
            self.dao.get_product_by_id(product_id)
            .map(_optional_product)
            .distinct_until_changed()
        )

    async def get_product_by_id_once(self, product_id: str) -> Optional[Product]:
        return _optional_product(await self.dao.get_product_by_id_once(product_id))

    async def get_product_by_barcode(self, barcode: str) -> Optional[Product]:
        return _optional_product(await self.dao.get_product_by_barcode(barcode))

    async def get_expiring_products(self, days_threshold: int) -> List[Product]:
        current_time = self.clock()
        threshold_time = current_time + days_to_millis(days_threshold)

        entities = await self.dao.get_expiring_products(
            threshold_ms=threshold_time, current_ms=current_time
        )
        return _products(entities)

    def get_expired_products(self) -> Flow[List[Product]]:
        return (
            self.dao.get_expired_products(self.clock)
            .map(_products)
            .distinct_until_changed()
        )

    async def insert_product(self, product: Product):
        await self.dao.insert_product(product_to_entity(product))

    async def update_product(self, product: Product):
        await self.dao.update_product(product_to_entity(product))

    async def delete_product(self, product_id: str):
        await self.dao.delete_product_by_id(product_id)

    async def mark_as_consumed(self, product_id: str):
        await self.dao.mark_as_consumed(product_id)

    async def mark_as_discarded(self, product_id: str):
        await self.dao.mark_as_discarded(product_id)

    def get_active_product_count(self) -> Flow[int]:
        return self.dao.get_active_product_count().distinct_until_changed()


class SqlCategoryRepository(CategoryRepository):
    def __init__(self, dao: CategoryDao):
        self.dao = dao

    def get_all_categories(self) -> Flow[List[Category]]:
        return (
            self.dao.get_all_categories()
            .map(lambda entities: [category_to_domain(e) for e in entities])
            .distinct_until_changed()
        )

    async def get_all_categories_once(self) -> List[Category]:
        entities = await self.dao.get_all_categories_once()
        return [category_to_domain(entity) for entity in entities]

    async def get_category_by_name(self, name: str) -> Optional[Category]:
        entity = await self.dao.get_category_by_name(name)
        return category_to_domain(entity) if entity is not None else None

    async def insert_category(self, category: Category):
        await self.dao.insert_category(category_to_entity(category))

    async def update_category(self, category: Category):
        await self.dao.update_category(category_to_entity(category))

    async def delete_category(self, name: str):
        await self.dao.delete_category_by_name(name)
