"""
Repositories en mémoire, mêmes sémantiques vivantes que la version SQL.
Utilisés comme doublures dans les tests des services.
"""

from typing import Callable, Dict, Iterable, List, Optional, Tuple

from freshtrack.core.flow import Flow, MutableStateFlow
from freshtrack.domain.product import Category, Product
from freshtrack.repositories.base import CategoryRepository, ProductRepository
from freshtrack.utils.date_helpers import current_millis, days_to_millis


def _by_expiry(products: Iterable[Product]) -> List[Product]:
    return sorted(products, key=lambda p: p.expiry_date)


class InMemoryProductRepository(ProductRepository):
    def __init__(
        self,
        products: Iterable[Product] = (),
        clock: Callable[[], int] = current_millis,
    ):
        self.clock = clock
        self._rows: MutableStateFlow[Tuple[Product, ...]] = MutableStateFlow(
            tuple(products)
        )

    @property
    def rows(self) -> Tuple[Product, ...]:
        return self._rows.value

    def _write(self, rows: Dict[str, Product]):
        self._rows.value = tuple(rows.values())

    def _index(self) -> Dict[str, Product]:
        return {product.id: product for product in self._rows.value}

    def _active(self, rows) -> List[Product]:
        return _by_expiry(p for p in rows if p.is_active)

    def get_all_products(self) -> Flow[List[Product]]:
        return self._rows.map(self._active).distinct_until_changed()

    def get_products_by_category(self, category: str) -> Flow[List[Product]]:
        return self._rows.map(
            lambda rows: [p for p in self._active(rows) if p.category == category]
        ).distinct_until_changed()

    def get_product_by_id(self, product_id: str) -> Flow[Optional[Product]]:
        return self._rows.map(
            lambda rows: next((p for p in rows if p.id == product_id), None)
        ).distinct_until_changed()

    async def get_product_by_id_once(self, product_id: str) -> Optional[Product]:
        return self._index().get(product_id)

    async def get_product_by_barcode(self, barcode: str) -> Optional[Product]:
        return next((p for p in self._rows.value if p.barcode == barcode), None)

    async def get_expiring_products(self, days_threshold: int) -> List[Product]:
        current_time = self.clock()
        threshold_time = current_time + days_to_millis(days_threshold)
        return [
            p
            for p in self._active(self._rows.value)
            if p.notification_enabled
            and current_time <= p.expiry_date <= threshold_time
        ]

    def get_expired_products(self) -> Flow[List[Product]]:
        def expired(rows):
            now = self.clock()
            items = [p for p in rows if p.is_active and p.expiry_date < now]
            return sorted(items, key=lambda p: p.expiry_date, reverse=True)

        return self._rows.map(expired).distinct_until_changed()

    async def insert_product(self, product: Product):
        rows = self._index()
        rows[product.id] = product
        self._write(rows)

    async def update_product(self, product: Product):
        rows = self._index()
        if product.id in rows:
            rows[product.id] = product
            self._write(rows)

    async def delete_product(self, product_id: str):
        rows = self._index()
        if rows.pop(product_id, None) is not None:
            self._write(rows)

    async def mark_as_consumed(self, product_id: str):
        await self._set_flag(product_id, is_consumed=True)

    async def mark_as_discarded(self, product_id: str):
        await self._set_flag(product_id, is_discarded=True)

    async def _set_flag(self, product_id: str, **flag):
        rows = self._index()
        if product_id in rows:
            rows[product_id] = rows[product_id].with_changes(**flag)
            self._write(rows)

    def get_active_product_count(self) -> Flow[int]:
        return self._rows.map(
            lambda rows: sum(1 for p in rows if p.is_active)
        ).distinct_until_changed()


class InMemoryCategoryRepository(CategoryRepository):
    def __init__(self, categories: Iterable[Category] = ()):
        self._rows: MutableStateFlow[Tuple[Category, ...]] = MutableStateFlow(
            tuple(categories)
        )

    def _sorted(self, rows) -> List[Category]:
        return sorted(rows, key=lambda c: c.sort_order)

    def _index(self) -> Dict[str, Category]:
        return {category.name: category for category in self._rows.value}

    def get_all_categories(self) -> Flow[List[Category]]:
        return self._rows.map(self._sorted).distinct_until_changed()

    async def get_all_categories_once(self) -> List[Category]:
        return self._sorted(self._rows.value)

    async def get_category_by_name(self, name: str) -> Optional[Category]:
        return self._index().get(name)

    async def insert_category(self, category: Category):
        rows = self._index()
        rows[category.name] = category
        self._rows.value = tuple(rows.values())

    async def update_category(self, category: Category):
        rows = self._index()
        if category.name in rows:
            rows[category.name] = category
            self._rows.value = tuple(rows.values())

    async def delete_category(self, name: str):
        rows = self._index()
        if rows.pop(name, None) is not None:
            self._rows.value = tuple(rows.values())
