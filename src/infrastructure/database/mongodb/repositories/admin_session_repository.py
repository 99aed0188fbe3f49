# File: src/infrastructure/database/mongodb/repositories/admin_session_repository.py
from datetime import datetime
from typing import Any, Dict, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from infrastructure.database.mongodb.repository import MongoRepository, Session

SESSIONS_COLLECTION = "admin_sessions"


class AdminSessionRepository:
    """Pending OTP challenges. A unique index on `admin_id` keeps one per admin."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.repo = MongoRepository(db, SESSIONS_COLLECTION)

    async def find_by_id(self, session_id: str) -> Optional[Dict[str, Any]]:
        return await self.repo.find_one({"_id": session_id})

    async def find_by_admin(self, admin_id: str) -> Optional[Dict[str, Any]]:
        return await self.repo.find_one({"admin_id": admin_id})

    async def insert(self, admin_id: str, otp_hash: str, expires_at: datetime, tx: Session = None) -> str:
        return await self.repo.insert_one(
            {"admin_id": admin_id, "otp_hash": otp_hash, "expires_at": expires_at, "attempts": 0},
            session=tx,
        )

    async def increment_attempts(self, session_id: str) -> Optional[Dict[str, Any]]:
        return await self.repo.increment({"_id": session_id}, "attempts")

    async def delete(self, session_id: str, tx: Session = None) -> int:
        return await self.repo.delete_one({"_id": session_id}, session=tx)

    async def delete_by_admin(self, admin_id: str, tx: Session = None) -> int:
        return await self.repo.delete_many({"admin_id": admin_id}, session=tx)
