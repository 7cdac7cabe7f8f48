from typing import Optional

from pydantic import BaseModel, ConfigDict

from freshtrack.core.flow import MutableStateFlow, Subscription
from freshtrack.domain.product import Product
from freshtrack.repositories.base import ProductRepository


class ProductDetailsState(BaseModel):
    model_config = ConfigDict(frozen=True)

    product: Optional[Product] = None
    is_loading: bool = True


class ProductDetailsService:
    """Fiche produit : suivi vivant d'un produit et actions associées"""

    def __init__(self, product_repository: ProductRepository):
        self.product_repository = product_repository
        self.state = MutableStateFlow(ProductDetailsState())
        self._subscription: Optional[Subscription] = None

    def load_product(self, product_id: str):
        self.close()

        def on_product(product: Optional[Product]):
            self.state.value = ProductDetailsState(product=product, is_loading=False)

        self._subscription = self.product_repository.get_product_by_id(
            product_id
        ).subscribe(on_product)

    def _product_id(self) -> Optional[str]:
        product = self.state.value.product
        return product.id if product else None

    async def delete_product(self) -> bool:
        product_id = self._product_id()
        if product_id is None:
            return False
        await self.product_repository.delete_product(product_id)
        return True

    async def mark_as_consumed(self) -> bool:
        product_id = self._product_id()
        if product_id is None:
            return False
        await self.product_repository.mark_as_consumed(product_id)
        return True

    async def mark_as_discarded(self) -> bool:
        product_id = self._product_id()
        if product_id is None:
            return False
        await self.product_repository.mark_as_discarded(product_id)
        return True

    def close(self):
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
