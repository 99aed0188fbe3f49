# File: src/domain/categories/services/category_service.py

from typing import Any, Dict, List, Optional

from common.base_service.base_service import BaseService
from common.config.settings import settings
from common.exceptions.base_exception import BadRequestException, ConflictException, NotFoundException
from common.logging.logger import log_info
from common.utils.pagination import build_pagination
from domain.categories.entities.category_entity import Category, CategoryListItem, CategoryStatus

CATEGORIES_LIST_KEY = "categories_list"
DUPLICATE_TITLE = "Category with this title already exists"


class CategoryService(BaseService):
    """Category catalogue; the ACTIVE dropdown list is cached in Redis."""

    def __init__(self, categories, cache, cache_ttl: Optional[int] = settings.CATEGORIES_CACHE_TTL):
        self.categories = categories
        self.cache = cache
        self.cache_ttl = cache_ttl

    async def _invalidate_list(self):
        await self.cache.delete(CATEGORIES_LIST_KEY)

    async def _get_or_404(self, category_id: str) -> Dict[str, Any]:
        category = await self.categories.find_by_id(category_id)
        if not category:
            raise NotFoundException("Category not found")
        return category

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        context = {"entity_type": "category", "action": "create", "endpoint": "/categories"}

        async def operation():
            if await self.categories.find_by_title(data["title"]):
                raise BadRequestException(DUPLICATE_TITLE)
            document = {**data, "status": CategoryStatus(data.get("status") or CategoryStatus.ACTIVE).value}
            try:
                category_id = await self.categories.insert(document)
            except ConflictException:
                raise BadRequestException(DUPLICATE_TITLE)
            await self._invalidate_list()
            return Category.from_document(await self._get_or_404(category_id)).model_dump()

        return await self.execute(operation, context)

    async def find_all(self, page: int = 1, limit: int = 10, search: Optional[str] = None) -> Dict[str, Any]:
        context = {"entity_type": "category", "action": "list", "endpoint": "/categories"}

        async def operation():
            items, total = await self.categories.list(page=page, limit=limit, search=search)
            return {
                "categories": [Category.from_document(item).model_dump() for item in items],
                "pagination": build_pagination(total, page, limit),
            }

        return await self.execute(operation, context)

    async def find_one(self, category_id: str) -> Dict[str, Any]:
        context = {"entity_type": "category", "entity_id": category_id, "action": "read"}

        async def operation():
            return Category.from_document(await self._get_or_404(category_id)).model_dump()

        return await self.execute(operation, context)

    async def update(self, category_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        context = {"entity_type": "category", "entity_id": category_id, "action": "update"}

        async def operation():
            await self._get_or_404(category_id)
            if not fields:
                raise BadRequestException("No fields to update")
            if "title" in fields and await self.categories.find_by_title(fields["title"], exclude_id=category_id):
                raise BadRequestException(DUPLICATE_TITLE)
            if "status" in fields:
                fields["status"] = CategoryStatus(fields["status"]).value
            try:
                updated = await self.categories.update(category_id, fields)
            except ConflictException:
                raise BadRequestException(DUPLICATE_TITLE)
            if not updated:
                raise NotFoundException("Category not found")
            await self._invalidate_list()
            return Category.from_document(updated).model_dump()

        return await self.execute(operation, context)

    async def delete(self, category_id: str) -> Dict[str, Any]:
        context = {"entity_type": "category", "entity_id": category_id, "action": "delete"}

        async def operation():
            category = await self._get_or_404(category_id)
            await self.categories.delete(category_id)
            await self._invalidate_list()
            return Category.from_document(category).model_dump()

        return await self.execute(operation, context)

    async def list(self) -> List[Dict[str, Any]]:
        context = {"entity_type": "category", "action": "dropdown", "endpoint": "/categories/list"}

        async def operation():
            cached = await self.cache.get_json(CATEGORIES_LIST_KEY)
            if cached is not None:
                return cached

            rows = await self.categories.list_active()
            items = [CategoryListItem(id=str(row["_id"]), title=row["title"]).model_dump() for row in rows]
            await self.cache.set_json(CATEGORIES_LIST_KEY, items, ttl=self.cache_ttl)
            log_info("Categories list cached", extra={"count": len(items)})
            return items

        return await self.execute(operation, context)
