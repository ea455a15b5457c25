"""Shared dependencies for the Physics LMS service."""

from typing import Any, Dict, Optional
from aiocache import Cache
import structlog
from jose import jwt, JWTError
from datetime import datetime, timedelta
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from physics_lms.core.config import settings
from physics_lms.core.database import get_db
from physics_lms.schemas.user import CurrentUser
from physics_lms.services.progress_service import ProgressService
from physics_lms.services.resource_service import ResourceService
from physics_lms.services.statistics_service import StatisticsService
from physics_lms.services.user_service import UserService

logger = structlog.get_logger()

# Global instances
_cache: Optional[Cache] = None

# Security; a missing header is reported by the routes, not by FastAPI
security = HTTPBearer(auto_error=False)


async def get_cache() -> Cache:
    """Get the shared cache, falling back to in-memory when Redis is unavailable."""
    global _cache

    if _cache is None:
        if settings.REDIS_URL:
            try:
                _cache = Cache.from_url(settings.REDIS_URL)
                await _cache.exists("test")  # Test connection
                logger.info("Redis cache connection established")
            except Exception as e:
                logger.warning("Redis cache not available", error=str(e))
                _cache = Cache(Cache.MEMORY)
        else:
            _cache = Cache(Cache.MEMORY)

    return _cache


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token.

    Production sessions are issued by the identity provider; this mints
    tokens signed with the same secret for local development and tests.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)

    to_encode.update({"exp": expire})
    if settings.JWT_AUDIENCE:
        to_encode.setdefault("aud", settings.JWT_AUDIENCE)
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode a bearer token, returning None when it is not a valid session."""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"verify_aud": settings.JWT_AUDIENCE is not None},
        )
    except JWTError as e:
        logger.info("Rejected session token", error=str(e))
        return None

    if not payload.get("sub"):
        return None
    return payload


async def get_session_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[Dict[str, Any]]:
    """Claims of the caller's session token, or None when unauthenticated."""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return UserService(db)


def get_statistics_service(db: AsyncSession = Depends(get_db)) -> StatisticsService:
    return StatisticsService(db)


def get_progress_service(db: AsyncSession = Depends(get_db)) -> ProgressService:
    return ProgressService(db)


async def get_resource_service(
    db: AsyncSession = Depends(get_db),
    cache: Cache = Depends(get_cache)
) -> ResourceService:
    return ResourceService(db, cache)


async def get_current_user(
    claims: Optional[Dict[str, Any]] = Depends(get_session_claims),
    users: UserService = Depends(get_user_service)
) -> CurrentUser:
    """Require an authenticated user."""
    user = await users.get_current_user(claims)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
