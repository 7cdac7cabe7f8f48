from typing import Callable, Iterable, List, Optional
import logging

from pydantic import BaseModel, ConfigDict

from freshtrack.core.flow import Flow, MutableStateFlow, combine
from freshtrack.domain.product import Category, Product, ProductFilter, ProductSort
from freshtrack.repositories.base import CategoryRepository, ProductRepository
from freshtrack.utils.date_helpers import current_millis

logger = logging.getLogger(__name__)

_SORT_KEYS = {
    ProductSort.EXPIRY_DATE_ASC: (lambda p: p.expiry_date, False),
    ProductSort.EXPIRY_DATE_DESC: (lambda p: p.expiry_date, True),
    ProductSort.NAME_ASC: (lambda p: p.name, False),
    ProductSort.NAME_DESC: (lambda p: p.name, True),
    ProductSort.ADDED_DATE_DESC: (lambda p: p.added_date, True),
}


def filter_products(
    products: Iterable[Product],
    product_filter: ProductFilter,
    category: Optional[str],
    now_ms: int,
) -> List[Product]:
    if product_filter == ProductFilter.EXPIRING_SOON:
        return [p for p in products if 0 <= p.days_until_expiry(now_ms) <= 7]

    if product_filter == ProductFilter.EXPIRED:
        return [p for p in products if p.is_expired(now_ms)]

    if product_filter == ProductFilter.BY_CATEGORY and category is not None:
        return [p for p in products if p.category == category]

    return list(products)


def sort_products(products: Iterable[Product], sort: ProductSort) -> List[Product]:
    # sorted() est stable, y compris avec reverse=True : les égalités gardent
    # l'ordre du flux d'entrée
    key, reverse = _SORT_KEYS[sort]
    return sorted(products, key=key, reverse=reverse)


def apply_filter_and_sort(
    products: Iterable[Product],
    product_filter: ProductFilter,
    sort: ProductSort,
    category: Optional[str] = None,
    now_ms: Optional[int] = None,
) -> List[Product]:
    now = current_millis() if now_ms is None else now_ms
    return sort_products(filter_products(products, product_filter, category, now), sort)


class ProductListState(BaseModel):
    model_config = ConfigDict(frozen=True)

    products: List[Product] = []
    categories: List[Category] = []
    current_filter: ProductFilter = ProductFilter.ALL
    current_sort: ProductSort = ProductSort.EXPIRY_DATE_ASC
    selected_category: Optional[str] = None


class ProductListService:
    """
    Moteur de requête de la liste de produits.

    ``products`` est recalculé à chaque émission du flux des produits actifs
    ou à chaque changement de filtre, de tri ou de catégorie sélectionnée.
    """

    def __init__(
        self,
        product_repository: ProductRepository,
        category_repository: CategoryRepository,
        clock: Callable[[], int] = current_millis,
    ):
        self.product_repository = product_repository
        self.category_repository = category_repository
        self.clock = clock

        self.current_filter = MutableStateFlow(ProductFilter.ALL)
        self.current_sort = MutableStateFlow(ProductSort.EXPIRY_DATE_ASC)
        self.selected_category: MutableStateFlow[Optional[str]] = MutableStateFlow(None)

    @property
    def products(self) -> Flow[List[Product]]:
        return combine(
            self.product_repository.get_all_products(),
            self.current_filter,
            self.current_sort,
            self.selected_category,
            transform=self._compute,
        )

    @property
    def categories(self) -> Flow[List[Category]]:
        return self.category_repository.get_all_categories()

    @property
    def state(self) -> Flow[ProductListState]:
        return combine(
            self.products,
            self.categories,
            transform=lambda products, categories: ProductListState(
                products=products,
                categories=categories,
                current_filter=self.current_filter.value,
                current_sort=self.current_sort.value,
                selected_category=self.selected_category.value,
            ),
        )

    def _compute(self, products, product_filter, sort, category) -> List[Product]:
        return apply_filter_and_sort(products, product_filter, sort, category, self.clock())

    def set_filter(self, product_filter: ProductFilter):
        self.current_filter.value = product_filter

    def set_sort(self, sort: ProductSort):
        self.current_sort.value = sort

    def select_category(self, category: Optional[str]):
        self.selected_category.value = category
        if category is not None:
            self.current_filter.value = ProductFilter.BY_CATEGORY

    async def delete_product(self, product_id: str):
        await self.product_repository.delete_product(product_id)

    async def mark_as_consumed(self, product_id: str):
        await self.product_repository.mark_as_consumed(product_id)

    async def mark_as_discarded(self, product_id: str):
        await self.product_repository.mark_as_discarded(product_id)
