# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for SkillBridge

This package provides the repository layer for data access,
separating business logic from database queries.

Usage:
    from app.repositories import RepositoryFactory

    repository = RepositoryFactory.create_booking_repository(db)
"""

from .base_repository import BaseRepository, IRepository
from .factory import RepositoryFactory
from .listing import ListingParams, ListingQueryBuilder, Page

__all__ = [
    "BaseRepository",
    "IRepository",
    "ListingParams",
    "ListingQueryBuilder",
    "Page",
    "RepositoryFactory",
]
