from pydantic import BaseModel, Field
from typing import Optional

from freshtrack.utils.validators import COLOR_HEX_PATTERN


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    color_hex: str = Field(..., pattern=COLOR_HEX_PATTERN)
    icon: str = Field(..., min_length=1, max_length=50)
    sort_order: int = 0


class CategoryUpdate(BaseModel):
    color_hex: Optional[str] = Field(None, pattern=COLOR_HEX_PATTERN)
    icon: Optional[str] = Field(None, min_length=1, max_length=50)
    sort_order: Optional[int] = None


class CategoryResponse(BaseModel):
    name: str
    color_hex: str
    icon: str
    sort_order: int

    class Config:
        from_attributes = True
