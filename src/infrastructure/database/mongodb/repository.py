# File: infrastructure/database/mongodb/repository.py

from typing import Any, Dict, List, Optional, Tuple
from uuid import uuid4

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from common.exceptions.base_exception import ConflictException, DatabaseConnectionException
from common.logging.logger import log_info, log_error
from common.utils.date_utils import utc_now

Session = Optional[AsyncIOMotorClientSession]


class MongoRepository:
    """
    Thin async wrapper over one collection. Documents use string UUID `_id`s;
    every method accepts an optional client session so callers can group
    writes into a transaction.
    """

    def __init__(self, db: AsyncIOMotorDatabase, collection_name: str):
        self.db = db
        self.collection = db[collection_name]

    def _fail(self, action: str, error: Exception):
        log_error(f"Mongo {action} failed", extra={"collection": self.collection.name, "error": str(error)}, exc_info=True)
        raise DatabaseConnectionException("MongoDB", f"Failed to {action} document")

    async def insert_one(self, document: Dict[str, Any], session: Session = None) -> str:
        now = utc_now()
        document = {"_id": str(uuid4()), "created_at": now, "updated_at": now, **document}
        try:
            result = await self.collection.insert_one(document, session=session)
        except DuplicateKeyError as e:
            log_error("Mongo insert_one duplicate key", extra={"collection": self.collection.name, "error": str(e)})
            raise ConflictException("Duplicate record")
        except Exception as e:
            self._fail("insert", e)
        inserted_id = str(result.inserted_id)
        log_info("Mongo insert_one", extra={"collection": self.collection.name, "id": inserted_id})
        return inserted_id

    async def find_one(
        self,
        query: Dict[str, Any],
        projection: Optional[Dict[str, int]] = None,
        session: Session = None,
    ) -> Optional[Dict[str, Any]]:
        try:
            result = await self.collection.find_one(query, projection, session=session)
        except Exception as e:
            self._fail("find", e)
        log_info("Mongo find_one", extra={"collection": self.collection.name, "found": bool(result)})
        return result

    async def find_with_pagination(
        self,
        query: Dict[str, Any],
        skip: int = 0,
        limit: int = 10,
        sort: Optional[List[Tuple[str, int]]] = None,
        projection: Optional[Dict[str, int]] = None,
    ) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.find(query, projection)
            if sort:
                cursor = cursor.sort(sort)
            result = await cursor.skip(skip).limit(limit).to_list(length=limit)
        except Exception as e:
            self._fail("paginate", e)
        log_info("Mongo find_with_pagination", extra={"collection": self.collection.name, "skip": skip, "limit": limit, "count": len(result)})
        return result

    async def find(
        self,
        query: Dict[str, Any],
        sort: Optional[List[Tuple[str, int]]] = None,
        projection: Optional[Dict[str, int]] = None,
    ) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.find(query, projection)
            if sort:
                cursor = cursor.sort(sort)
            result = await cursor.to_list(length=None)
        except Exception as e:
            self._fail("fetch", e)
        log_info("Mongo find", extra={"collection": self.collection.name, "count": len(result)})
        return result

    async def count(self, query: Dict[str, Any], session: Session = None) -> int:
        try:
            return await self.collection.count_documents(query, session=session)
        except Exception as e:
            self._fail("count", e)

    async def update_one(
        self,
        query: Dict[str, Any],
        update: Dict[str, Any],
        session: Session = None,
    ) -> Optional[Dict[str, Any]]:
        """Applies `$set` and returns the updated document, or None when nothing matched."""
        try:
            result = await self.collection.find_one_and_update(
                query,
                {"$set": {**update, "updated_at": utc_now()}},
                return_document=ReturnDocument.AFTER,
                session=session,
            )
        except DuplicateKeyError as e:
            log_error("Mongo update_one duplicate key", extra={"collection": self.collection.name, "error": str(e)})
            raise ConflictException("Duplicate record")
        except Exception as e:
            self._fail("update", e)
        log_info("Mongo update_one", extra={"collection": self.collection.name, "matched": result is not None})
        return result

    async def increment(self, query: Dict[str, Any], field: str, amount: int = 1, session: Session = None) -> Optional[Dict[str, Any]]:
        try:
            result = await self.collection.find_one_and_update(
                query,
                {"$inc": {field: amount}, "$set": {"updated_at": utc_now()}},
                return_document=ReturnDocument.AFTER,
                session=session,
            )
        except Exception as e:
            self._fail("increment", e)
        log_info("Mongo increment", extra={"collection": self.collection.name, "field": field})
        return result

    async def delete_one(self, query: Dict[str, Any], session: Session = None) -> int:
        try:
            result = await self.collection.delete_one(query, session=session)
        except Exception as e:
            self._fail("delete", e)
        log_info("Mongo delete_one", extra={"collection": self.collection.name, "deleted": result.deleted_count})
        return result.deleted_count

    async def delete_many(self, query: Dict[str, Any], session: Session = None) -> int:
        try:
            result = await self.collection.delete_many(query, session=session)
        except Exception as e:
            self._fail("delete", e)
        log_info("Mongo delete_many", extra={"collection": self.collection.name, "deleted": result.deleted_count})
        return result.deleted_count
