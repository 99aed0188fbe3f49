# File: src/api/routers/categories/categories.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from common.dependencies.services import get_category_service
from common.schemas.standard_response import StandardResponse
from common.security.access_guard import require_admin
from domain.categories.entities.category_entity import CategoryStatus
from domain.categories.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"], dependencies=[Depends(require_admin)])


class CreateCategoryRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    status: CategoryStatus = CategoryStatus.ACTIVE
    image_url: Optional[str] = Field(None, max_length=2048)

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


class UpdateCategoryRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=3, max_length=255)
    status: Optional[CategoryStatus] = None
    image_url: Optional[str] = Field(None, max_length=2048)

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


@router.post("", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def create_category(data: CreateCategoryRequest, service: CategoryService = Depends(get_category_service)):
    category = await service.create(data.model_dump(mode="json", exclude_none=True))
    return StandardResponse.ok("Category created successfully", category)


@router.get("", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def get_categories(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    service: CategoryService = Depends(get_category_service),
):
    result = await service.find_all(page=page, limit=limit, search=search)
    return StandardResponse.ok("Categories fetched successfully", result)


@router.get("/list", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def list_categories(service: CategoryService = Depends(get_category_service)):
    return StandardResponse.ok("Categories list fetched successfully", await service.list())


@router.get("/{category_id}", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def get_category(category_id: UUID, service: CategoryService = Depends(get_category_service)):
    return StandardResponse.ok("Category fetched successfully", await service.find_one(str(category_id)))


@router.put("/{category_id}", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def update_category(
    category_id: UUID,
    data: UpdateCategoryRequest,
    service: CategoryService = Depends(get_category_service),
):
    category = await service.update(str(category_id), data.model_dump(mode="json", exclude_none=True))
    return StandardResponse.ok("Category updated successfully", category)


@router.delete("/{category_id}", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def delete_category(category_id: UUID, service: CategoryService = Depends(get_category_service)):
    return StandardResponse.ok("Category deleted successfully", await service.delete(str(category_id)))
