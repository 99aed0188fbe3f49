# File: src/infrastructure/database/mongodb/repositories/category_repository.py
import re
from typing import Any, Dict, List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING

from infrastructure.database.mongodb.repository import MongoRepository

CATEGORIES_COLLECTION = "categories"


class CategoryRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.repo = MongoRepository(db, CATEGORIES_COLLECTION)

    async def find_by_id(self, category_id: str) -> Optional[Dict[str, Any]]:
        return await self.repo.find_one({"_id": category_id})

    async def find_by_title(self, title: str, exclude_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        query: Dict[str, Any] = {"title": title}
        if exclude_id:
            query["_id"] = {"$ne": exclude_id}
        return await self.repo.find_one(query)

    async def insert(self, category_data: Dict[str, Any]) -> str:
        return await self.repo.insert_one(category_data)

    async def update(self, category_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.repo.update_one({"_id": category_id}, fields)

    async def delete(self, category_id: str) -> int:
        return await self.repo.delete_one({"_id": category_id})

    async def list(self, page: int = 1, limit: int = 10, search: Optional[str] = None) -> Tuple[List[Dict[str, Any]], int]:
        query: Dict[str, Any] = {}
        if search:
            query["title"] = {"$regex": re.escape(search), "$options": "i"}
        items = await self.repo.find_with_pagination(
            query,
            skip=(page - 1) * limit,
            limit=limit,
            sort=[("title", ASCENDING)],
        )
        total = await self.repo.count(query)
        return items, total

    async def list_active(self) -> List[Dict[str, Any]]:
        """Dropdown rows: ACTIVE categories, `_id` and title only, by title."""
        return await self.repo.find(
            {"status": "ACTIVE"},
            sort=[("title", ASCENDING)],
            projection={"_id": 1, "title": 1},
        )
