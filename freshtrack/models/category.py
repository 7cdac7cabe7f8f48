from sqlalchemy import Column, Integer, String
from typing import List

from freshtrack.core.database import Base


class CategoryEntity(Base):
    __tablename__ = "categories"

    name = Column(String, primary_key=True)
    color_hex = Column(String, nullable=False)
    icon = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0, index=True)

    def __repr__(self):
        return f"<CategoryEntity(name={self.name}, sort_order={self.sort_order})>"


DEFAULT_CATEGORIES = [
    {"name": "Food", "color_hex": "#4CAF50", "icon": "restaurant", "sort_order": 0},
    {"name": "Medicine", "color_hex": "#F44336", "icon": "medication", "sort_order": 1},
    {"name": "Cosmetics", "color_hex": "#E91E63", "icon": "face", "sort_order": 2},
    {"name": "Beverages", "color_hex": "#2196F3", "icon": "local_drink", "sort_order": 3},
    {"name": "Other", "color_hex": "#9E9E9E", "icon": "category", "sort_order": 4},
]


def default_categories() -> List[CategoryEntity]:
    return [CategoryEntity(**values) for values in DEFAULT_CATEGORIES]
