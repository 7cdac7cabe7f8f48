from pydantic import BaseModel, Field, field_validator
from typing import Optional

from freshtrack.domain.product import ExpiryUrgency, Product
from freshtrack.utils.validators import validate_barcode


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    barcode: Optional[str] = Field(None, max_length=50)
    category: str = Field(..., min_length=1, max_length=100)
    expiry_date: int = Field(..., gt=0, description="Timestamp en millisecondes")
    quantity: int = 1
    notes: Optional[str] = None
    image_uri: Optional[str] = None
    notification_enabled: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Product name is required")
        return v.strip()

    @field_validator("barcode")
    @classmethod
    def validate_barcode(cls, v):
        if v and not validate_barcode(v):
            raise ValueError("Barcode must contain only digits and dashes")
        return v or None


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    barcode: Optional[str] = None
    category: Optional[str] = None
    expiry_date: Optional[int] = Field(None, gt=0)
    quantity: Optional[int] = None
    notes: Optional[str] = None
    image_uri: Optional[str] = None
    notification_enabled: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Product name is required")
        return v.strip() if v else v

    @field_validator("barcode")
    @classmethod
    def validate_barcode(cls, v):
        if v and not validate_barcode(v):
            raise ValueError("Barcode must contain only digits and dashes")
        return v or None


class ProductResponse(BaseModel):
    id: str
    name: str
    barcode: Optional[str]
    category: str
    expiry_date: int
    added_date: int
    quantity: int
    notes: Optional[str]
    image_uri: Optional[str]
    notification_enabled: bool
    is_consumed: bool
    is_discarded: bool

    days_until_expiry: int
    is_expired: bool
    urgency: ExpiryUrgency

    @classmethod
    def from_product(cls, product: Product, now_ms: Optional[int] = None):
        return cls(
            **product.model_dump(),
            days_until_expiry=product.days_until_expiry(now_ms),
            is_expired=product.is_expired(now_ms),
            urgency=product.get_urgency(now_ms),
        )
