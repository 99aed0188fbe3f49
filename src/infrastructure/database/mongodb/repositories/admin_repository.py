# File: src/infrastructure/database/mongodb/repositories/admin_repository.py
import re
from typing import Any, Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING

from infrastructure.database.mongodb.repository import MongoRepository, Session

ADMINS_COLLECTION = "admins"

# Everything but the hash; used for every read that leaves the auth flow
PUBLIC_PROJECTION = {"password_hash": 0}


class AdminRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.repo = MongoRepository(db, ADMINS_COLLECTION)

    async def find_credentials_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self.repo.find_one(
            {"email": email},
            projection={"_id": 1, "email": 1, "password_hash": 1},
        )

    async def find_by_id(self, admin_id: str, tx: Session = None) -> Optional[Dict[str, Any]]:
        return await self.repo.find_one({"_id": admin_id}, projection=PUBLIC_PROJECTION, session=tx)

    async def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self.repo.find_one({"email": email}, projection=PUBLIC_PROJECTION)

    async def find_by_email_or_phone(
        self,
        email: Optional[str],
        phone: Optional[str],
        exclude_id: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        clauses = [{field: value} for field, value in (("email", email), ("phone", phone)) if value]
        if not clauses:
            return None
        query: Dict[str, Any] = {"$or": clauses}
        if exclude_id:
            query["_id"] = {"$ne": exclude_id}
        return await self.repo.find_one(query, projection=PUBLIC_PROJECTION)

    async def insert(self, admin_data: Dict[str, Any]) -> str:
        return await self.repo.insert_one(admin_data)

    async def update(self, admin_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        updated = await self.repo.update_one({"_id": admin_id}, fields)
        if updated:
            updated.pop("password_hash", None)
        return updated

    async def delete(self, admin_id: str, tx: Session = None) -> int:
        return await self.repo.delete_one({"_id": admin_id}, session=tx)

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[str] = None,
    ) -> Tuple[List[Dict[str, Any]], int]:
        query: Dict[str, Any] = {}
        if search:
            query["first_name"] = {"$regex": re.escape(search), "$options": "i"}
        if role:
            query["role"] = role
        items = await self.repo.find_with_pagination(
            query,
            skip=(page - 1) * limit,
            limit=limit,
            sort=[("created_at", DESCENDING)],
            projection=PUBLIC_PROJECTION,
        )
        total = await self.repo.count(query)
        return items, total
