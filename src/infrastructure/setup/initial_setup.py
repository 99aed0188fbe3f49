# infrastructure/setup/initial_setup.py
from typing import Optional

from common.config.settings import settings
from common.exceptions.base_exception import ConflictException
from common.logging.logger import log_info, log_warning
from common.security.password import hash_password_async
from common.validators.phone import validate_and_format_phone
from domain.admin.entities.admin_entity import AdminRole
from infrastructure.database.mongodb.repositories.admin_repository import AdminRepository


async def setup_super_admin(admin_repo: AdminRepository) -> Optional[str]:
    """
    Create the configured super admin unless one with that email exists.
    Returns the new admin id, or None when nothing was created.
    """
    email = settings.SUPER_ADMIN_EMAIL
    password = settings.SUPER_ADMIN_PASSWORD

    if not email or not password:
        log_warning("SUPER_ADMIN_EMAIL / SUPER_ADMIN_PASSWORD not set, skipping super admin setup")
        return None
    if len(password) < 8:
        raise ValueError("SUPER_ADMIN_PASSWORD must be at least 8 characters long")

    if await admin_repo.find_by_email(email):
        log_info("Super admin already exists", extra={"email": email})
        return None

    admin_data = {
        "email": email,
        "password_hash": await hash_password_async(password),
        "first_name": settings.SUPER_ADMIN_FIRST_NAME,
        "last_name": settings.SUPER_ADMIN_LAST_NAME,
        "country": settings.SUPER_ADMIN_COUNTRY,
        "city": settings.SUPER_ADMIN_CITY,
        "role": AdminRole.SUPER_ADMIN.value,
    }
    if settings.SUPER_ADMIN_PHONE:
        admin_data["phone"] = validate_and_format_phone(settings.SUPER_ADMIN_PHONE)

    try:
        admin_id = await admin_repo.insert(admin_data)
    except ConflictException:
        # another instance seeded it first
        log_warning("Super admin insert raced", extra={"email": email})
        return None

    log_info("Super admin created", extra={"admin_id": admin_id})
    return admin_id
