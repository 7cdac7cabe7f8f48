"""
Modèle de domaine : Product, Category et états dérivés (urgence, filtres, tris)
"""

from enum import Enum
from typing import Any, Dict, Optional
import uuid

from pydantic import BaseModel, ConfigDict, Field, field_validator

from freshtrack.models.category import CategoryEntity
from freshtrack.models.product import ProductEntity
from freshtrack.utils import date_helpers
from freshtrack.utils.validators import COLOR_HEX_PATTERN


class ExpiryUrgency(str, Enum):
    SAFE = "SAFE"  # > 7 jours
    WARNING = "WARNING"  # 3 à 7 jours
    CRITICAL = "CRITICAL"  # 0 à 2 jours
    EXPIRED = "EXPIRED"  # < 0 jour


class ProductFilter(str, Enum):
    ALL = "ALL"
    EXPIRING_SOON = "EXPIRING_SOON"
    EXPIRED = "EXPIRED"
    BY_CATEGORY = "BY_CATEGORY"


class ProductSort(str, Enum):
    EXPIRY_DATE_ASC = "EXPIRY_DATE_ASC"
    EXPIRY_DATE_DESC = "EXPIRY_DATE_DESC"
    NAME_ASC = "NAME_ASC"
    NAME_DESC = "NAME_DESC"
    ADDED_DATE_DESC = "ADDED_DATE_DESC"


def _now(now_ms: Optional[int]) -> int:
    return date_helpers.current_millis() if now_ms is None else now_ms


class Product(BaseModel):
    """
    Un article suivi. Immuable : les modifications passent par ``with_changes``
    qui conserve l'id et ré-applique les validations.

    Les méthodes temporelles sont évaluées à l'instant de l'appel (ou à
    ``now_ms``), sans cache.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: str
    name: str
    barcode: Optional[str] = None
    category: str
    expiry_date: int
    added_date: int
    quantity: int = 1
    notes: Optional[str] = None
    image_uri: Optional[str] = None
    notification_enabled: bool = True
    is_consumed: bool = False
    is_discarded: bool = False

    @field_validator("quantity")
    @classmethod
    def clamp_quantity(cls, v):
        return max(v, 1)

    @classmethod
    def create(cls, now_ms: Optional[int] = None, **fields: Any) -> "Product":
        """Flux d'ajout : attribue l'id et la date d'ajout"""
        fields.setdefault("id", str(uuid.uuid4()))
        fields.setdefault("added_date", _now(now_ms))
        return cls(**fields)

    def with_changes(self, **changes: Any) -> "Product":
        changes.pop("id", None)
        return Product.model_validate({**self.model_dump(), **changes})

    @property
    def is_active(self) -> bool:
        return not self.is_consumed and not self.is_discarded

    def days_until_expiry(self, now_ms: Optional[int] = None) -> int:
        return date_helpers.days_until_expiry(self.expiry_date, _now(now_ms))

    def is_expired(self, now_ms: Optional[int] = None) -> bool:
        return date_helpers.is_expired(self.expiry_date, _now(now_ms))

    def get_urgency(self, now_ms: Optional[int] = None) -> ExpiryUrgency:
        return urgency_for_days(self.days_until_expiry(now_ms))


def urgency_for_days(days: int) -> ExpiryUrgency:
    if days < 0:
        return ExpiryUrgency.EXPIRED
    if days <= 2:
        return ExpiryUrgency.CRITICAL
    if days <= 7:
        return ExpiryUrgency.WARNING
    return ExpiryUrgency.SAFE


class Category(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    name: str
    color_hex: str = Field(pattern=COLOR_HEX_PATTERN)
    icon: str
    sort_order: int = 0


def product_to_domain(entity: ProductEntity) -> Product:
    return Product.model_validate(entity)


def product_to_entity(product: Product) -> ProductEntity:
    return ProductEntity(**product.model_dump())


def category_to_domain(entity: CategoryEntity) -> Category:
    return Category.model_validate(entity)


def category_to_entity(category: Category) -> CategoryEntity:
    return CategoryEntity(**category.model_dump())


def entity_values(entity) -> Dict[str, Any]:
    """Valeurs de colonnes d'une entité, pour comparer des enregistrements"""
    return {
        column.name: getattr(entity, column.name)
        for column in entity.__table__.columns
    }
