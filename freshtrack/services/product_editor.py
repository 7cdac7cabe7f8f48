from typing import Callable, List, Optional
import logging

from pydantic import BaseModel, ConfigDict

from freshtrack.core.flow import MutableStateFlow, Subscription
from freshtrack.domain.product import Category, Product
from freshtrack.repositories.base import CategoryRepository, ProductRepository
from freshtrack.utils.date_helpers import current_millis
from freshtrack.utils.exceptions import ProductValidationError, StorageError
from freshtrack.utils.validators import blank_to_none

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Food"


class ProductFormState(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: str = ""
    name: str = ""
    barcode: Optional[str] = None
    selected_category: str = DEFAULT_CATEGORY
    available_categories: List[Category] = []
    expiry_date: int = 0
    quantity: int = 1
    notes: str = ""
    image_uri: Optional[str] = None
    notification_enabled: bool = True
    is_edit_mode: bool = False
    is_saving: bool = False
    error: Optional[str] = None


def validate_form(state: ProductFormState):
    if not state.name.strip():
        raise ProductValidationError("Product name is required")

    if state.expiry_date == 0:
        raise ProductValidationError("Expiry date is required")


class ProductEditor:
    """
    Flux d'ajout / modification d'un produit.

    Les erreurs (validation ou stockage) ne sont jamais levées vers l'appelant :
    elles sont exposées dans ``state.error`` et le formulaire reste inchangé.
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
        self.state = MutableStateFlow(ProductFormState())
        self._subscriptions: List[Subscription] = []

    def _update(self, **changes):
        self.state.update(lambda state: state.model_copy(update=changes))

    def load_categories(self):
        def on_categories(categories: List[Category]):
            changes = {"available_categories": categories}
            if not self.state.value.is_edit_mode:
                changes["selected_category"] = (
                    categories[0].name if categories else DEFAULT_CATEGORY
                )
            self._update(**changes)

        self._subscriptions.append(
            self.category_repository.get_all_categories().subscribe(on_categories)
        )

    async def load_product(self, product_id: str) -> bool:
        product = await self.product_repository.get_product_by_id_once(product_id)
        if product is None:
            return False

        self._update(
            product_id=product.id,
            name=product.name,
            barcode=product.barcode,
            selected_category=product.category,
            expiry_date=product.expiry_date,
            quantity=product.quantity,
            notes=product.notes or "",
            image_uri=product.image_uri,
            notification_enabled=product.notification_enabled,
            is_edit_mode=True,
        )
        return True

    def update_name(self, name: str):
        self._update(name=name)

    def update_barcode(self, barcode: str):
        self._update(barcode=barcode)

    def update_category(self, category: str):
        self._update(selected_category=category)

    def update_expiry_date(self, timestamp_ms: int):
        self._update(expiry_date=timestamp_ms)

    def update_quantity(self, quantity: int):
        self._update(quantity=max(quantity, 1))

    def update_notes(self, notes: str):
        self._update(notes=notes)

    def update_image_uri(self, uri: str):
        self._update(image_uri=uri)

    def toggle_notification(self, enabled: bool):
        self._update(notification_enabled=enabled)

    def clear_error(self):
        self._update(error=None)

    async def save(self) -> bool:
        state = self.state.value

        try:
            validate_form(state)
        except ProductValidationError as e:
            self._update(error=e.message)
            return False

        self._update(is_saving=True, error=None)

        fields = dict(
            name=state.name.strip(),
            barcode=blank_to_none(state.barcode),
            category=state.selected_category,
            expiry_date=state.expiry_date,
            quantity=state.quantity,
            notes=blank_to_none(state.notes),
            image_uri=state.image_uri,
            notification_enabled=state.notification_enabled,
        )

        try:
            if state.is_edit_mode:
                existing = await self.product_repository.get_product_by_id_once(
                    state.product_id
                )
                if existing is None:
                    raise StorageError(f"product {state.product_id} no longer exists")
                await self.product_repository.update_product(
                    existing.with_changes(**fields)
                )
            else:
                product = Product.create(now_ms=self.clock(), **fields)
                await self.product_repository.insert_product(product)
                self._update(product_id=product.id)
        except (StorageError, ValueError) as e:
            logger.error(f"Failed to save product: {e}", exc_info=True)
            self._update(is_saving=False, error=f"Failed to save product: {e}")
            return False

        self._update(is_saving=False)
        logger.info(f"Product saved: {state.name.strip()}")
        return True

    def close(self):
        for subscription in self._subscriptions:
            subscription.dispose()
        self._subscriptions.clear()
