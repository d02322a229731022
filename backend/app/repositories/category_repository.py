# backend/app/repositories/category_repository.py
"""Category taxonomy data access."""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.category import Category
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, db: Session):
        super().__init__(db, Category)

    def list_categories(self, type_: Optional[str] = None, include_inactive: bool = False) -> List[Category]:
        query = self.db.query(Category)
        if type_:
            query = query.filter(Category.type == type_)
        if not include_inactive:
            query = query.filter(Category.is_active.is_(True))
        return self._execute_query(query.order_by(Category.order.asc(), Category.name.asc()))

    def get_by_slug(self, slug: str) -> Optional[Category]:
        return self.find_one_by(slug=slug)
