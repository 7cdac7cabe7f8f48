from sqlalchemy import delete, select
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from freshtrack.core.database import Database
from freshtrack.core.flow import Flow
from freshtrack.middleware.transaction_handler import transactional
from freshtrack.models.category import CategoryEntity

logger = logging.getLogger(__name__)

CATEGORIES = CategoryEntity.__tablename__


def _all_categories(session: Session) -> List[CategoryEntity]:
    return session.scalars(
        select(CategoryEntity).order_by(CategoryEntity.sort_order.asc())
    ).all()


class CategoryDao:
    def __init__(self, database: Database):
        self.database = database

    def get_all_categories(self) -> Flow[List[CategoryEntity]]:
        return self.database.live_query(
            [CATEGORIES], _all_categories, name="categories"
        )

    async def get_all_categories_once(self) -> List[CategoryEntity]:
        return await self.database.run(_all_categories)

    async def get_category_by_name(self, name: str) -> Optional[CategoryEntity]:
        return await self.database.run(
            lambda session: session.get(CategoryEntity, name)
        )

    @transactional(CATEGORIES)
    def insert_category(self, session: Session, category: CategoryEntity):
        session.merge(category)
        logger.info(f"Category upserted: {category.name}")

    @transactional(CATEGORIES)
    def insert_categories(self, session: Session, categories: List[CategoryEntity]):
        for category in categories:
            session.merge(category)
        logger.info(f"{len(categories)} category(ies) upserted")

    @transactional(CATEGORIES)
    def update_category(self, session: Session, category: CategoryEntity) -> bool:
        if session.get(CategoryEntity, category.name) is None:
            logger.info(f"Update skipped, category {category.name} not found")
            return False

        session.merge(category)
        logger.info(f"Category updated: {category.name}")
        return True

    @transactional(CATEGORIES)
    def delete_category_by_name(self, session: Session, name: str) -> bool:
        # Pas de cascade : les produits gardent l'ancien nom
        result = session.execute(delete(CategoryEntity).where(CategoryEntity.name == name))
        logger.info(f"Category deleted: {name}")
        return result.rowcount > 0
