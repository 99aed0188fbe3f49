# File: src/infrastructure/database/redis/repositories/cache_repository.py
import json
from typing import Any, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from common.exceptions.base_exception import ServiceUnavailableException
from common.logging.logger import log_info, log_error


class CacheRepository:
    """JSON values under plain string keys."""

    def __init__(self, redis: Redis):
        self.redis = redis

    async def get_json(self, key: str) -> Optional[Any]:
        try:
            value = await self.redis.get(key)
        except RedisError as e:
            log_error("Redis get failed", extra={"key": key, "error": str(e)})
            raise ServiceUnavailableException("Redis unavailable")
        log_info("Redis get", extra={"key": key, "hit": value is not None})
        return json.loads(value) if value is not None else None

    async def set_json(self, key: str, value: Any, ttl: Optional[int] = None):
        try:
            await self.redis.set(key, json.dumps(value, default=str), ex=ttl)
        except RedisError as e:
            log_error("Redis set failed", extra={"key": key, "error": str(e)})
            raise ServiceUnavailableException("Redis unavailable")
        log_info("Redis set", extra={"key": key, "ttl": ttl})

    async def delete(self, key: str):
        try:
            await self.redis.delete(key)
        except RedisError as e:
            log_error("Redis delete failed", extra={"key": key, "error": str(e)})
            raise ServiceUnavailableException("Redis unavailable")
        log_info("Redis delete", extra={"key": key})
