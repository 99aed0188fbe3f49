# File: common/security/access_guard.py

from typing import Iterable

from fastapi import Depends, HTTPException, Request, Response

from common.dependencies.services import get_access_guard
from common.exceptions.base_exception import ForbiddenException, UnauthorizedException
from common.logging.logger import log_error, log_info
from common.security.cookies import (
    ACCESS_TOKEN_COOKIE,
    REFRESH_TOKEN_COOKIE,
    REFRESH_TOKEN_ID_COOKIE,
    set_access_cookie,
)
from domain.admin.entities.admin_entity import AdminPayload, AdminRole
from domain.admin.services.access_guard import AccessGuard


async def get_current_admin(
    request: Request,
    response: Response,
    guard: AccessGuard = Depends(get_access_guard),
) -> AdminPayload:
    """
    Authenticate the admin from the session cookies.

    Stores the principal on `request.state.admin`. A silently refreshed
    access token goes back to the client as a new cookie.

    Raises:
        HTTPException: 401 for every authentication failure.
    """
    try:
        result = await guard.authenticate(
            request.cookies.get(ACCESS_TOKEN_COOKIE),
            request.cookies.get(REFRESH_TOKEN_COOKIE),
            request.cookies.get(REFRESH_TOKEN_ID_COOKIE),
        )
    except HTTPException:
        raise
    except Exception as e:
        log_error("Admin authentication failed", extra={"path": request.url.path, "error": str(e)}, exc_info=True)
        raise UnauthorizedException(str(e) or "Access denied")

    if not result.ok:
        log_error("Admin access denied", extra={"path": request.url.path, "reason": result.outcome.value})
    result.raise_for_status()

    if result.refreshed_access_token:
        set_access_cookie(response, result.refreshed_access_token)

    request.state.admin = result.principal
    log_info("Admin authenticated", extra={"admin_id": result.principal.id, "outcome": result.outcome.value})
    return result.principal


def check_role(request: Request, allowed_roles: Iterable[AdminRole]) -> AdminPayload:
    admin = getattr(request.state, "admin", None)
    if admin is None:
        raise UnauthorizedException("Access denied")
    if admin.role not in allowed_roles:
        log_error("Role access denied", extra={"admin_id": admin.id, "role": admin.role.value})
        raise ForbiddenException("Access denied")
    return admin


def require_roles(*allowed_roles: AdminRole):
    def dependency(request: Request, _: AdminPayload = Depends(get_current_admin)) -> AdminPayload:
        return check_role(request, allowed_roles)
    return dependency


require_admin = require_roles(AdminRole.ADMIN, AdminRole.SUPER_ADMIN)
require_super_admin = require_roles(AdminRole.SUPER_ADMIN)
