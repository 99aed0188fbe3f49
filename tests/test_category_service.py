import pytest

from common.exceptions.base_exception import BadRequestException, NotFoundException
from domain.categories.services.category_service import CATEGORIES_LIST_KEY


async def test_list_is_filled_on_miss_and_served_from_cache(category_service, categories, cache):
    await category_service.create({"title": "Travel", "status": "ACTIVE"})
    await category_service.create({"title": "Art", "status": "ACTIVE"})
    await category_service.create({"title": "Drafts", "status": "INACTIVE"})

    first = await category_service.list()
    second = await category_service.list()

    assert [item["title"] for item in first] == ["Art", "Travel"]
    assert second == first
    assert cache.values[CATEGORIES_LIST_KEY] == first
    assert categories.list_active_calls == 1


async def test_every_mutation_invalidates_the_list(category_service, cache):
    created = await category_service.create({"title": "Travel"})
    await category_service.list()
    assert CATEGORIES_LIST_KEY in cache.values

    await category_service.update(created["id"], {"status": "INACTIVE"})
    assert CATEGORIES_LIST_KEY not in cache.values
    assert await category_service.list() == []

    await category_service.delete(created["id"])
    assert CATEGORIES_LIST_KEY not in cache.values


async def test_duplicate_title_and_missing_category(category_service):
    created = await category_service.create({"title": "Travel"})
    other = await category_service.create({"title": "Food"})

    with pytest.raises(BadRequestException):
        await category_service.create({"title": "Travel"})
    with pytest.raises(BadRequestException):
        await category_service.update(other["id"], {"title": "Travel"})
    with pytest.raises(NotFoundException):
        await category_service.find_one("missing")
    with pytest.raises(NotFoundException):
        await category_service.delete("missing")

    assert (await category_service.find_one(created["id"]))["status"] == "ACTIVE"


async def test_find_all_paginates_and_searches(category_service):
    for title in ("Art", "Artisan Food", "Travel"):
        await category_service.create({"title": title})

    page = await category_service.find_all(page=1, limit=2, search="art")

    assert [item["title"] for item in page["categories"]] == ["Art", "Artisan Food"]
    assert page["pagination"]["total"] == 2
    assert page["pagination"]["has_next_page"] is False
