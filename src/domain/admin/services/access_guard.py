# File: src/domain/admin/services/access_guard.py

from typing import Callable, Optional

from common.logging.logger import log_info, log_warning
from common.security.jwt.errors import InvalidTokenError
from common.security.jwt.tokens import TokenService, refresh_token_matches
from common.utils.date_utils import is_past, utc_now
from domain.admin.entities.admin_entity import AdminPayload
from domain.admin.entities.auth_results import GuardOutcome, GuardResult


def extract_token(cookie_value: Optional[str]) -> str:
    """Accepts both `<jwt>` and `Bearer <jwt>`."""
    if not cookie_value:
        return ""
    parts = cookie_value.strip().split(" ", 1)
    return parts[1].strip() if len(parts) == 2 else parts[0]


class AccessGuard:
    """
    Authenticates a request from its cookies. An invalid or expired access
    token is replaced by a fresh one when the refresh cookies still check out;
    the refresh token itself is not rotated.
    """

    def __init__(self, token_service: TokenService, admins, refresh_tokens, clock: Callable = utc_now):
        self.token_service = token_service
        self.admins = admins
        self.refresh_tokens = refresh_tokens
        self.clock = clock

    async def authenticate(
        self,
        access_cookie: Optional[str],
        refresh_token: Optional[str] = None,
        refresh_token_id: Optional[str] = None,
    ) -> GuardResult:
        token = extract_token(access_cookie)
        if not token:
            return GuardResult(GuardOutcome.MISSING_TOKEN)

        try:
            claims = self.token_service.verify_access_token(token)
        except InvalidTokenError:
            return await self._refresh(refresh_token, refresh_token_id)

        return GuardResult(GuardOutcome.AUTHENTICATED, principal=AdminPayload(**claims))

    async def _refresh(self, refresh_token: Optional[str], refresh_token_id: Optional[str]) -> GuardResult:
        if not refresh_token or not refresh_token_id:
            return GuardResult(GuardOutcome.REFRESH_MISSING)

        record = await self.refresh_tokens.find_by_id(refresh_token_id)
        if not record:
            log_warning("Silent refresh failed", extra={"refresh_token_id": refresh_token_id, "reason": "not_found"})
            return GuardResult(GuardOutcome.REFRESH_NOT_FOUND)

        if not refresh_token_matches(refresh_token, record["refresh_token_hash"]):
            log_warning("Silent refresh failed", extra={"refresh_token_id": refresh_token_id, "reason": "mismatch"})
            return GuardResult(GuardOutcome.REFRESH_MISMATCH)

        if is_past(record["expires_at"], self.clock()):
            await self.refresh_tokens.delete(refresh_token_id)
            log_warning("Silent refresh failed", extra={"refresh_token_id": refresh_token_id, "reason": "expired"})
            return GuardResult(GuardOutcome.REFRESH_EXPIRED)

        admin = await self.admins.find_by_id(record["admin_id"])
        if not admin:
            return GuardResult(GuardOutcome.ADMIN_NOT_FOUND)

        principal = AdminPayload.from_admin(admin)
        access_token = self.token_service.issue_access_token(principal.token_claims())
        log_info("Access token refreshed", extra={"admin_id": principal.id, "refresh_token_id": refresh_token_id})
        return GuardResult(
            GuardOutcome.REFRESHED,
            principal=principal,
            refreshed_access_token=f"Bearer {access_token}",
        )
