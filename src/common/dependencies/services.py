# File: common/dependencies/services.py

from functools import lru_cache

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from redis.asyncio import Redis

from common.config.settings import settings
from common.security.jwt.tokens import TokenService
from domain.admin.services.access_guard import AccessGuard
from domain.admin.services.admin_service import AdminService
from domain.admin.services.auth_service import AdminAuthService
from domain.categories.services.category_service import CategoryService
from domain.notification.services.email_service import EmailService
from infrastructure.database.mongodb.connection import MongoDBConnection, get_mongo_db
from infrastructure.database.mongodb.repositories.admin_repository import AdminRepository
from infrastructure.database.mongodb.repositories.admin_session_repository import AdminSessionRepository
from infrastructure.database.mongodb.repositories.category_repository import CategoryRepository
from infrastructure.database.mongodb.repositories.refresh_token_repository import RefreshTokenRepository
from infrastructure.database.redis.redis_client import get_redis_client
from infrastructure.database.redis.repositories.cache_repository import CacheRepository


@lru_cache
def get_token_service() -> TokenService:
    """Built once; raises TokenConfigurationError when JWT_SECRET_KEY is empty."""
    return TokenService(
        secret=settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM,
        access_ttl_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


def get_email_service() -> EmailService:
    return EmailService()


def get_admin_repository(db: AsyncIOMotorDatabase = Depends(get_mongo_db)) -> AdminRepository:
    return AdminRepository(db)


def get_session_repository(db: AsyncIOMotorDatabase = Depends(get_mongo_db)) -> AdminSessionRepository:
    return AdminSessionRepository(db)


def get_refresh_token_repository(db: AsyncIOMotorDatabase = Depends(get_mongo_db)) -> RefreshTokenRepository:
    return RefreshTokenRepository(db)


def get_category_repository(db: AsyncIOMotorDatabase = Depends(get_mongo_db)) -> CategoryRepository:
    return CategoryRepository(db)


def get_cache_repository(redis: Redis = Depends(get_redis_client)) -> CacheRepository:
    return CacheRepository(redis)


def get_auth_service(
    admins: AdminRepository = Depends(get_admin_repository),
    sessions: AdminSessionRepository = Depends(get_session_repository),
    refresh_tokens: RefreshTokenRepository = Depends(get_refresh_token_repository),
    token_service: TokenService = Depends(get_token_service),
    mailer: EmailService = Depends(get_email_service),
) -> AdminAuthService:
    return AdminAuthService(
        admins=admins,
        sessions=sessions,
        refresh_tokens=refresh_tokens,
        token_service=token_service,
        mailer=mailer,
        transaction=MongoDBConnection.transaction,
    )


def get_access_guard(
    admins: AdminRepository = Depends(get_admin_repository),
    refresh_tokens: RefreshTokenRepository = Depends(get_refresh_token_repository),
    token_service: TokenService = Depends(get_token_service),
) -> AccessGuard:
    return AccessGuard(token_service=token_service, admins=admins, refresh_tokens=refresh_tokens)


def get_admin_service(
    admins: AdminRepository = Depends(get_admin_repository),
    sessions: AdminSessionRepository = Depends(get_session_repository),
    refresh_tokens: RefreshTokenRepository = Depends(get_refresh_token_repository),
) -> AdminService:
    return AdminService(admins, sessions, refresh_tokens, transaction=MongoDBConnection.transaction)


def get_category_service(
    categories: CategoryRepository = Depends(get_category_repository),
    cache: CacheRepository = Depends(get_cache_repository),
) -> CategoryService:
    return CategoryService(categories, cache)
