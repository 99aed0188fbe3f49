# File: src/domain/admin/services/admin_service.py

from typing import Any, AsyncContextManager, Callable, Dict, Optional

from common.base_service.base_service import BaseService
from common.exceptions.base_exception import BadRequestException, ConflictException, NotFoundException
from common.logging.logger import log_info
from common.security.password import hash_password_async
from common.utils.pagination import build_pagination
from domain.admin.entities.admin_entity import AdminProfile, AdminRole

ALREADY_EXISTS = "Admin already exists"


class AdminService(BaseService):
    def __init__(self, admins, sessions, refresh_tokens, transaction: Callable[[], AsyncContextManager[Any]]):
        self.admins = admins
        self.sessions = sessions
        self.refresh_tokens = refresh_tokens
        self.transaction = transaction

    async def _ensure_unique(self, email: Optional[str], phone: Optional[str], exclude_id: Optional[str] = None):
        if await self.admins.find_by_email_or_phone(email, phone, exclude_id=exclude_id):
            raise BadRequestException(ALREADY_EXISTS)

    async def create_admin(self, data: Dict[str, Any]) -> Dict[str, Any]:
        context = {"entity_type": "admin", "action": "create", "endpoint": "/admins/create-admin"}

        async def operation():
            await self._ensure_unique(data["email"], data.get("phone"))
            if data["password"] != data["confirm_password"]:
                raise BadRequestException("Password and confirm password do not match")

            document = {key: value for key, value in data.items() if key not in ("password", "confirm_password")}
            document["role"] = AdminRole(document.get("role") or AdminRole.ADMIN).value
            document["password_hash"] = await hash_password_async(data["password"])
            try:
                admin_id = await self.admins.insert(document)
            except ConflictException:
                raise BadRequestException(ALREADY_EXISTS)

            log_info("Admin created", extra={"admin_id": admin_id, "role": document["role"]})
            return AdminProfile.from_document(await self.admins.find_by_id(admin_id)).model_dump()

        return await self.execute(operation, context)

    async def get_admins(self, page: int = 1, limit: int = 10, search: Optional[str] = None, role: Optional[str] = None):
        context = {"entity_type": "admin", "action": "list", "endpoint": "/admins"}

        async def operation():
            items, total = await self.admins.list(page=page, limit=limit, search=search, role=role)
            return {
                "admins": [AdminProfile.from_document(item).model_dump() for item in items],
                "pagination": build_pagination(total, page, limit),
            }

        return await self.execute(operation, context)

    async def get_admin(self, admin_id: str) -> Dict[str, Any]:
        context = {"entity_type": "admin", "entity_id": admin_id, "action": "read"}

        async def operation():
            admin = await self.admins.find_by_id(admin_id)
            if not admin:
                raise NotFoundException("Admin not found")
            return AdminProfile.from_document(admin).model_dump()

        return await self.execute(operation, context)

    async def _update(self, admin_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        if not await self.admins.find_by_id(admin_id):
            raise NotFoundException("Admin not found")
        if not fields:
            raise BadRequestException("No fields to update")
        await self._ensure_unique(fields.get("email"), fields.get("phone"), exclude_id=admin_id)
        try:
            updated = await self.admins.update(admin_id, fields)
        except ConflictException:
            raise BadRequestException(ALREADY_EXISTS)
        if not updated:
            raise NotFoundException("Admin not found")
        return AdminProfile.from_document(updated).model_dump()

    async def update_me(self, admin_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Profile fields only; the role can never be changed through this path."""
        context = {"entity_type": "admin", "entity_id": admin_id, "action": "update_me", "endpoint": "/admins/me"}
        fields = {key: value for key, value in fields.items() if key != "role"}

        async def operation():
            return await self._update(admin_id, fields)

        return await self.execute(operation, context)

    async def update_admin(self, admin_id: str, fields: Dict[str, Any], acting_admin_id: str) -> Dict[str, Any]:
        context = {
            "entity_type": "admin",
            "entity_id": admin_id,
            "action": "update",
            "endpoint": "/admins/{id}",
            "acting_admin_id": acting_admin_id,
        }

        async def operation():
            if "role" in fields:
                if admin_id == acting_admin_id:
                    raise BadRequestException("You cannot change your own role")
                fields["role"] = AdminRole(fields["role"]).value
            return await self._update(admin_id, fields)

        return await self.execute(operation, context)

    async def delete_admin(self, admin_id: str, acting_admin_id: str) -> Dict[str, Any]:
        context = {
            "entity_type": "admin",
            "entity_id": admin_id,
            "action": "delete",
            "endpoint": "/admins/{id}",
            "acting_admin_id": acting_admin_id,
        }

        async def operation():
            if admin_id == acting_admin_id:
                raise BadRequestException("You cannot delete yourself")
            admin = await self.admins.find_by_id(admin_id)
            if not admin:
                raise NotFoundException("Admin not found")

            async with self.transaction() as tx:
                await self.sessions.delete_by_admin(admin_id, tx=tx)
                await self.refresh_tokens.delete_by_admin(admin_id, tx=tx)
                await self.admins.delete(admin_id, tx=tx)

            log_info("Admin deleted", extra={"admin_id": admin_id, "acting_admin_id": acting_admin_id})
            return AdminProfile.from_document(admin).model_dump()

        return await self.execute(operation, context)
