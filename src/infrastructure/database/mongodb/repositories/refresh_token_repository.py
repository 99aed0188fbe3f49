# File: src/infrastructure/database/mongodb/repositories/refresh_token_repository.py
from datetime import datetime
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from infrastructure.database.mongodb.repository import MongoRepository, Session

REFRESH_TOKENS_COLLECTION = "admin_refresh_tokens"


class RefreshTokenRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.repo = MongoRepository(db, REFRESH_TOKENS_COLLECTION)

    async def find_by_id(self, token_id: str) -> Optional[Dict[str, Any]]:
        return await self.repo.find_one({"_id": token_id})

    async def count_by_admin(self, admin_id: str, tx: Session = None) -> int:
        return await self.repo.count({"admin_id": admin_id}, session=tx)

    async def insert(
        self,
        admin_id: str,
        refresh_token_hash: str,
        expires_at: datetime,
        tx: Session = None,
    ) -> Dict[str, Any]:
        token_id = await self.repo.insert_one(
            {"admin_id": admin_id, "refresh_token_hash": refresh_token_hash, "expires_at": expires_at},
            session=tx,
        )
        return {"id": token_id, "expires_at": expires_at}

    async def delete(self, token_id: str, tx: Session = None) -> int:
        return await self.repo.delete_one({"_id": token_id}, session=tx)

    async def delete_by_admin(self, admin_id: str, tx: Session = None) -> int:
        return await self.repo.delete_many({"admin_id": admin_id}, session=tx)
