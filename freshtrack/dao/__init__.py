"""
Accès au stockage (entity store)
"""

from freshtrack.dao.product_dao import ProductDao
from freshtrack.dao.category_dao import CategoryDao

__all__ = ["ProductDao", "CategoryDao"]
