# File: infrastructure/database/mongodb/connection.py

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo import ASCENDING

from common.config.settings import settings
from common.exceptions.base_exception import ServiceUnavailableException
from common.logging.logger import log_info, log_error


class MongoDBConnection:
    _client: AsyncIOMotorClient = None
    _db: AsyncIOMotorDatabase = None

    @classmethod
    async def connect(cls):
        if cls._client is None:
            mongo_uri = settings.MONGO_URI or "mongodb://localhost:27017"
            timeout = settings.MONGO_TIMEOUT
            try:
                log_info("Attempting MongoDB connection", extra={"db": settings.MONGO_DB, "timeout": timeout})

                cls._client = AsyncIOMotorClient(
                    mongo_uri,
                    serverSelectionTimeoutMS=timeout,
                    tz_aware=True,
                    uuidRepresentation="standard",
                )
                cls._db = cls._client[settings.MONGO_DB]
                await cls._client.admin.command("ping")

                log_info("MongoDB connection established", extra={"db": settings.MONGO_DB})

            except Exception as e:
                log_error("MongoDB connection failed", extra={
                    "timeout": timeout,
                    "error": str(e)
                }, exc_info=True)
                cls._client = None
                cls._db = None
                raise ServiceUnavailableException("MongoDB unavailable")

    @classmethod
    async def disconnect(cls):
        if cls._client is not None:
            cls._client.close()
            log_info("MongoDB connection closed", extra={"db": settings.MONGO_DB})
            cls._client = None
            cls._db = None

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        if cls._db is None:
            log_error("Attempt to access MongoDB before connection was established")
            raise ServiceUnavailableException("MongoDB not connected. Call connect() first.")
        return cls._db

    @classmethod
    @asynccontextmanager
    async def transaction(cls) -> AsyncIterator[Optional[AsyncIOMotorClientSession]]:
        """
        Run the enclosed block in one multi-document transaction.
        Any exception raised inside aborts it. Yields None when transactions are
        disabled (standalone servers), in which case writes apply one by one.
        """
        if not settings.MONGO_USE_TRANSACTIONS:
            yield None
            return
        if cls._client is None:
            await cls.connect()
        async with await cls._client.start_session() as session:
            async with session.start_transaction():
                yield session


async def get_mongo_db() -> AsyncIOMotorDatabase:
    if MongoDBConnection._client is None:
        await MongoDBConnection.connect()
    return MongoDBConnection.get_db()


async def ensure_indexes(db: AsyncIOMotorDatabase):
    """Unique constraints the auth flow relies on, plus lookup indexes."""
    await db["admins"].create_index([("email", ASCENDING)], unique=True)
    await db["admins"].create_index([("phone", ASCENDING)], unique=True, sparse=True)
    # one pending OTP challenge per admin, also under concurrent logins
    await db["admin_sessions"].create_index([("admin_id", ASCENDING)], unique=True)
    await db["admin_refresh_tokens"].create_index([("admin_id", ASCENDING)])
    await db["categories"].create_index([("title", ASCENDING)], unique=True)
    log_info("MongoDB indexes ensured", extra={"db": db.name})
