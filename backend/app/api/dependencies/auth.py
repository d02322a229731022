# backend/app/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

The bearer token names the acting user by email. User lookups run through
``asyncio.to_thread`` so the sync session never blocks the event loop.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from fastapi import Depends
import jwt
from sqlalchemy.orm import Session

from ...auth import decode_access_token, oauth2_scheme_optional
from ...core.enums import RoleName
from ...core.exceptions import ForbiddenException, UnauthorizedException
from ...models.user import User
from ...repositories.factory import RepositoryFactory
from .database import get_db

logger = logging.getLogger(__name__)


def _email_from_token(token: str) -> Optional[str]:
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as e:
        logger.info(f"JWT validation error: {str(e)}")
        return None
    email = payload.get("sub")
    return email if isinstance(email, str) else None


def _lookup_user(db: Session, email: str) -> Optional[User]:
    return RepositoryFactory.create_user_repository(db).get_by_email(email)


async def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme_optional),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to an active user.

    Raises:
        UnauthorizedException: Token missing, invalid or expired, or the
            user is unknown or deactivated
    """
    if not token:
        raise UnauthorizedException("Not authenticated", code="NOT_AUTHENTICATED")

    email = _email_from_token(token)
    if email is None:
        raise UnauthorizedException("Could not validate credentials", code="INVALID_TOKEN")

    user = await asyncio.to_thread(_lookup_user, db, email)
    if user is None:
        logger.warning(f"Token subject {email} does not match any user")
        raise UnauthorizedException("Could not validate credentials", code="INVALID_TOKEN")
    if not user.is_active:
        raise UnauthorizedException("Account is deactivated", code="ACCOUNT_INACTIVE")

    return user


async def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme_optional),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Like ``get_current_user`` but anonymous callers get ``None``."""
    if not token:
        return None
    email = _email_from_token(token)
    if email is None:
        return None
    user = await asyncio.to_thread(_lookup_user, db, email)
    if user is None or not user.is_active:
        return None
    return user


def require_roles(*roles: RoleName) -> Callable[..., Awaitable[User]]:
    """Ensure the current user holds one of the given roles."""

    async def checker(current_user: User = Depends(get_current_user)) -> User:
        if not current_user.has_role(*roles):
            allowed = ", ".join(sorted(getattr(role, "value", role) for role in roles))
            raise ForbiddenException(f"Access denied. Required role: {allowed}")
        return current_user

    return checker


require_admin = require_roles(RoleName.ADMIN)
