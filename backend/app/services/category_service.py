# backend/app/services/category_service.py
"""
Category Service for SkillBridge

Public taxonomy reads plus admin maintenance. Slugs are derived from the
name and kept unique; deleting a category only deactivates it.
"""

import logging
import re
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.exceptions import (
    BusinessRuleException,
    ConflictException,
    NotFoundException,
    RepositoryException,
)
from ..models.category import Category
from ..repositories.factory import RepositoryFactory
from ..schemas.category import CategoryCreate, CategoryUpdate
from .base import BaseService

logger = logging.getLogger(__name__)


def slugify(name: str) -> str:
    """Lowercase the name and collapse anything non-alphanumeric into single hyphens."""
    value = re.sub(r"[^a-z0-9]+", "-", name.strip().lower())
    return value.strip("-")


class CategoryService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.repository = RepositoryFactory.create_category_repository(db)

    def _load_category(self, category_id: str) -> Category:
        category = self.repository.get_by_id(category_id, load_relationships=False)
        if category is None:
            raise NotFoundException("Category not found", code="CATEGORY_NOT_FOUND")
        return category

    def _ensure_unique(self, name: str, exclude_id: Optional[str] = None) -> str:
        slug = slugify(name)
        if not slug:
            raise BusinessRuleException("Category name must contain letters or digits")
        for existing in (self.repository.find_one_by(name=name), self.repository.get_by_slug(slug)):
            if existing is not None and existing.id != exclude_id:
                raise ConflictException(
                    "Category with this name already exists", code="DUPLICATE_CATEGORY"
                )
        return slug

    def _ensure_parent(self, parent_id: Optional[str], category_id: Optional[str] = None) -> None:
        if not parent_id:
            return
        if parent_id == category_id:
            raise BusinessRuleException("A category cannot be its own parent")
        self._load_category(parent_id)

    @BaseService.measure_operation("list_categories")
    def list_categories(
        self, category_type: Optional[str] = None, include_inactive: bool = False
    ) -> List[Category]:
        return self.repository.list_categories(category_type, include_inactive)

    @BaseService.measure_operation("get_category")
    def get_category(self, category_id: str) -> Category:
        return self._load_category(category_id)

    @BaseService.measure_operation("create_category")
    def create_category(self, category_data: CategoryCreate) -> Category:
        try:
            with self.transaction():
                slug = self._ensure_unique(category_data.name)
                self._ensure_parent(category_data.parent_id)
                category = self.repository.create(slug=slug, **category_data.model_dump())
        except RepositoryException as exc:
            if isinstance(exc.__cause__, IntegrityError):
                raise ConflictException(
                    "Category with this name already exists", code="DUPLICATE_CATEGORY"
                ) from exc
            raise

        self.logger.info(f"Category {category.slug} created ({category.id})")
        return category

    @BaseService.measure_operation("update_category")
    def update_category(self, category_id: str, category_data: CategoryUpdate) -> Category:
        with self.transaction():
            category = self._load_category(category_id)
            changes = category_data.model_dump(exclude_unset=True)
            if changes.get("name"):
                category.slug = self._ensure_unique(changes["name"], exclude_id=category.id)
            if "parent_id" in changes:
                self._ensure_parent(changes["parent_id"], category.id)
            for field, value in changes.items():
                if value is None and field != "parent_id":
                    continue
                setattr(category, field, value)
            self.repository.flush()
        return category

    @BaseService.measure_operation("deactivate_category")
    def delete_category(self, category_id: str) -> Category:
        """Soft delete: the category stays referenced by existing courses and services."""
        with self.transaction():
            category = self._load_category(category_id)
            category.is_active = False
            self.repository.flush()
        self.logger.info(f"Category {category_id} deactivated")
        return category
