"""
Contrats des repositories : seule passerelle entre le domaine et le stockage
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from freshtrack.core.flow import Flow
from freshtrack.domain.product import Category, Product


class ProductRepository(ABC):
    @abstractmethod
    def get_all_products(self) -> Flow[List[Product]]:
        """Produits actifs, triés par date de péremption croissante"""

    @abstractmethod
    def get_products_by_category(self, category: str) -> Flow[List[Product]]:
        ...

    @abstractmethod
    def get_product_by_id(self, product_id: str) -> Flow[Optional[Product]]:
        ...

    @abstractmethod
    async def get_product_by_id_once(self, product_id: str) -> Optional[Product]:
        ...

    @abstractmethod
    async def get_product_by_barcode(self, barcode: str) -> Optional[Product]:
        ...

    @abstractmethod
    async def get_expiring_products(self, days_threshold: int) -> List[Product]:
        """
        Produits actifs, notifiables, expirant dans [now, now + days_threshold jours],
        triés par date de péremption croissante. La fenêtre est calculée ici.
        """

    @abstractmethod
    def get_expired_products(self) -> Flow[List[Product]]:
        ...

    @abstractmethod
    async def insert_product(self, product: Product):
        ...

    @abstractmethod
    async def update_product(self, product: Product):
        ...

    @abstractmethod
    async def delete_product(self, product_id: str):
        ...

    @abstractmethod
    async def mark_as_consumed(self, product_id: str):
        ...

    @abstractmethod
    async def mark_as_discarded(self, product_id: str):
        ...

    @abstractmethod
    def get_active_product_count(self) -> Flow[int]:
        ...


class CategoryRepository(ABC):
    @abstractmethod
    def get_all_categories(self) -> Flow[List[Category]]:
        ...

    @abstractmethod
    async def get_all_categories_once(self) -> List[Category]:
        ...

    @abstractmethod
    async def get_category_by_name(self, name: str) -> Optional[Category]:
        ...

    @abstractmethod
    async def insert_category(self, category: Category):
        ...

    @abstractmethod
    async def update_category(self, category: Category):
        ...

    @abstractmethod
    async def delete_category(self, name: str):
        ...
