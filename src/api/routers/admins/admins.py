# File: src/api/routers/admins/admins.py

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from common.dependencies.services import get_admin_service
from common.schemas.standard_response import StandardResponse
from common.security.access_guard import require_admin, require_super_admin
from common.validators.email import validate_admin_email
from common.validators.phone import validate_admin_phone
from domain.admin.entities.admin_entity import AdminPayload, AdminRole
from domain.admin.services.admin_service import AdminService

router = APIRouter(prefix="/admins", tags=["Admins"])


class AdminProfileFields(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("email", check_fields=False)
    @classmethod
    def validate_email(cls, value: Optional[str]) -> Optional[str]:
        return validate_admin_email(value)

    @field_validator("phone", check_fields=False)
    @classmethod
    def validate_phone(cls, value: Optional[str]) -> Optional[str]:
        return validate_admin_phone(value)


class CreateAdminRequest(AdminProfileFields):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8, max_length=255)
    confirm_password: str = Field(..., min_length=8, max_length=255)
    first_name: str = Field(..., min_length=3, max_length=255)
    last_name: str = Field(..., min_length=3, max_length=255)
    phone: str = Field(..., min_length=3, max_length=255, examples=["+989123456789"])
    country: str = Field(..., min_length=3, max_length=255)
    city: str = Field(..., min_length=3, max_length=255)
    role: AdminRole


class UpdateAdminMeRequest(AdminProfileFields):
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    first_name: Optional[str] = Field(None, min_length=3, max_length=255)
    last_name: Optional[str] = Field(None, min_length=3, max_length=255)
    phone: Optional[str] = Field(None, min_length=3, max_length=255)
    country: Optional[str] = Field(None, min_length=3, max_length=255)
    city: Optional[str] = Field(None, min_length=3, max_length=255)


class UpdateAdminRequest(UpdateAdminMeRequest):
    role: Optional[AdminRole] = None


@router.post("/create-admin", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def create_admin(
    data: CreateAdminRequest,
    _: AdminPayload = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    admin = await service.create_admin(data.model_dump())
    return StandardResponse.ok("Admin created successfully", admin)


@router.get("", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def get_admins(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, min_length=3),
    role: Optional[AdminRole] = Query(None),
    _: AdminPayload = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    result = await service.get_admins(page=page, limit=limit, search=search, role=role.value if role else None)
    return StandardResponse.ok("Admins fetched successfully", result)


@router.get("/me", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def get_me(
    current_admin: AdminPayload = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    return StandardResponse.ok("Admin fetched successfully", await service.get_admin(current_admin.id))


@router.put("/me", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def update_me(
    data: UpdateAdminMeRequest,
    current_admin: AdminPayload = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
):
    admin = await service.update_me(current_admin.id, data.model_dump(exclude_none=True))
    return StandardResponse.ok("Admin updated successfully", admin)


@router.put("/{admin_id}", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def update_admin(
    admin_id: UUID,
    data: UpdateAdminRequest,
    current_admin: AdminPayload = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    admin = await service.update_admin(str(admin_id), data.model_dump(exclude_none=True), current_admin.id)
    return StandardResponse.ok("Admin updated successfully", admin)


@router.delete("/{admin_id}", status_code=status.HTTP_200_OK, response_model=StandardResponse)
async def delete_admin(
    admin_id: UUID,
    current_admin: AdminPayload = Depends(require_super_admin),
    service: AdminService = Depends(get_admin_service),
):
    admin = await service.delete_admin(str(admin_id), current_admin.id)
    return StandardResponse.ok("Admin deleted successfully", admin)
