# File: src/domain/admin/services/auth_service.py

from typing import Any, AsyncContextManager, Callable, Optional

from common.base_service.base_service import BaseService
from common.config.settings import settings
from common.exceptions.base_exception import ConflictException
from common.logging.logger import log_info, log_warning
from common.security.jwt.tokens import TokenService, hash_refresh_token, refresh_token_matches
from common.security.password import generate_otp, hash_otp_async, verify_otp_async, verify_password_async
from common.utils.date_utils import add_days, add_minutes, is_past, utc_now
from domain.admin.entities.admin_entity import AdminPayload, AdminProfile
from domain.admin.entities.auth_results import (
    IssuedRefreshToken,
    LoginOutcome,
    LoginResult,
    LogoutOutcome,
    LogoutResult,
    VerifyOtpOutcome,
    VerifyOtpResult,
)


class VerificationAborted(Exception):
    """Raised inside the finalize transaction to roll it back with a given outcome."""

    def __init__(self, outcome: VerifyOtpOutcome):
        super().__init__(outcome.value)
        self.outcome = outcome


class AdminAuthService(BaseService):
    """
    Two-factor admin login: password, then an emailed OTP, then a token pair.

    Per login attempt a session moves NoSession -> OtpPending -> Verified;
    an OtpPending session ends early when it expires or runs out of attempts.
    """

    def __init__(
        self,
        admins,
        sessions,
        refresh_tokens,
        token_service: TokenService,
        mailer,
        transaction: Callable[[], AsyncContextManager[Any]],
        clock: Callable = utc_now,
        otp_ttl_minutes: int = settings.OTP_EXPIRE_MINUTES,
        max_attempts: int = settings.OTP_MAX_ATTEMPTS,
        max_refresh_tokens: int = settings.MAX_ADMIN_REFRESH_TOKENS,
        refresh_ttl_days: int = settings.REFRESH_TOKEN_EXPIRE_DAYS,
    ):
        self.admins = admins
        self.sessions = sessions
        self.refresh_tokens = refresh_tokens
        self.token_service = token_service
        self.mailer = mailer
        self.transaction = transaction
        self.clock = clock
        self.otp_ttl_minutes = otp_ttl_minutes
        self.max_attempts = max_attempts
        self.max_refresh_tokens = max_refresh_tokens
        self.refresh_ttl_days = refresh_ttl_days

    async def login(self, email: str, password: str) -> LoginResult:
        context = {"entity_type": "admin_session", "action": "login", "endpoint": "/admins/login"}

        async def operation() -> LoginResult:
            admin = await self.admins.find_credentials_by_email(email)
            # the same outcome for unknown email and wrong password
            if not admin or not await verify_password_async(password, admin.get("password_hash")):
                log_warning("Admin login rejected", extra={"reason": "invalid_credentials"})
                return LoginResult(LoginOutcome.INVALID_CREDENTIALS)

            admin_id = str(admin["_id"])
            now = self.clock()
            old_session = await self.sessions.find_by_admin(admin_id)
            if old_session and not is_past(old_session["expires_at"], now):
                log_warning("Admin login rejected", extra={"admin_id": admin_id, "reason": "session_pending"})
                return LoginResult(LoginOutcome.SESSION_PENDING)

            otp = generate_otp()
            otp_hash = await hash_otp_async(otp)
            expires_at = add_minutes(now, self.otp_ttl_minutes)

            try:
                async with self.transaction() as tx:
                    if old_session:
                        await self.sessions.delete(old_session["_id"], tx=tx)
                    session_id = await self.sessions.insert(admin_id, otp_hash, expires_at, tx=tx)
                    # a delivery failure aborts the transaction, so no session survives it
                    try:
                        await self.mailer.send_otp(admin["email"], otp)
                    except Exception:
                        if tx is None:
                            # transactions disabled: nothing to abort, undo the insert instead
                            await self.sessions.delete(session_id)
                        raise
            except ConflictException:
                # a concurrent login inserted its session first
                log_warning("Admin login rejected", extra={"admin_id": admin_id, "reason": "concurrent_session"})
                return LoginResult(LoginOutcome.SESSION_PENDING)

            log_info("OTP session created", extra={"admin_id": admin_id, "session_id": session_id})
            return LoginResult(LoginOutcome.OK, session_id=session_id, email=admin["email"])

        return await self.execute(operation, context)

    async def verify_otp(self, session_id: str, otp: str) -> VerifyOtpResult:
        context = {
            "entity_type": "admin_session",
            "entity_id": session_id,
            "action": "verify_otp",
            "endpoint": "/admins/verify-otp",
        }

        async def operation() -> VerifyOtpResult:
            session = await self.sessions.find_by_id(session_id)
            if not session:
                return VerifyOtpResult(VerifyOtpOutcome.SESSION_NOT_FOUND)

            now = self.clock()
            if is_past(session["expires_at"], now):
                await self.sessions.delete(session_id)
                return VerifyOtpResult(VerifyOtpOutcome.SESSION_EXPIRED)

            if session.get("attempts", 0) >= self.max_attempts:
                await self.sessions.delete(session_id)
                return VerifyOtpResult(VerifyOtpOutcome.ATTEMPTS_EXHAUSTED)

            if not await verify_otp_async(otp, session["otp_hash"]):
                updated = await self.sessions.increment_attempts(session_id)
                if not updated:
                    # consumed or expired away since the lookup
                    return VerifyOtpResult(VerifyOtpOutcome.SESSION_NOT_FOUND)
                attempts = updated["attempts"]
                log_warning("Invalid OTP attempt", extra={"session_id": session_id, "attempts": attempts})
                if attempts >= self.max_attempts:
                    await self.sessions.delete(session_id)
                    return VerifyOtpResult(VerifyOtpOutcome.ATTEMPTS_EXHAUSTED)
                return VerifyOtpResult(VerifyOtpOutcome.INVALID_OTP)

            try:
                async with self.transaction() as tx:
                    # the delete is the single-use gate: only one verification removes the row
                    if not await self.sessions.delete(session_id, tx=tx):
                        raise VerificationAborted(VerifyOtpOutcome.SESSION_NOT_FOUND)
                    admin = await self.admins.find_by_id(session["admin_id"], tx=tx)
                    if not admin:
                        # rolls back the session delete
                        raise VerificationAborted(VerifyOtpOutcome.ADMIN_NOT_FOUND)

                    issued = await self._grant_refresh_token(admin, now, tx)
            except VerificationAborted as aborted:
                log_warning("OTP verification aborted", extra={"session_id": session_id, "reason": aborted.outcome.value})
                return VerifyOtpResult(aborted.outcome)

            access_token, refresh_token = issued
            log_info("Admin verified OTP", extra={"admin_id": str(admin["_id"]), "refresh_token_id": refresh_token.id})
            return VerifyOtpResult(
                VerifyOtpOutcome.VERIFIED,
                admin=AdminProfile.from_document(admin).model_dump(),
                access_token=f"Bearer {access_token}",
                refresh_token=refresh_token,
            )

        return await self.execute(operation, context)

    async def _grant_refresh_token(self, admin: dict, now, tx):
        admin_id = str(admin["_id"])
        # eviction by reset: at the cap every existing grant goes
        if await self.refresh_tokens.count_by_admin(admin_id, tx=tx) >= self.max_refresh_tokens:
            purged = await self.refresh_tokens.delete_by_admin(admin_id, tx=tx)
            log_info("Refresh tokens purged", extra={"admin_id": admin_id, "count": purged})

        tokens = self.token_service.issue_session_tokens(AdminPayload.from_admin(admin).token_claims())
        record = await self.refresh_tokens.insert(
            admin_id,
            hash_refresh_token(tokens.refresh_token),
            add_days(now, self.refresh_ttl_days),
            tx=tx,
        )
        return tokens.access_token, IssuedRefreshToken(
            id=record["id"],
            token=tokens.refresh_token,
            expires_at=record["expires_at"],
        )

    async def logout(self, refresh_token_id: Optional[str], refresh_token: Optional[str]) -> LogoutResult:
        context = {"entity_type": "admin_refresh_token", "entity_id": refresh_token_id, "action": "logout"}

        async def operation() -> LogoutResult:
            if not refresh_token_id or not refresh_token:
                return LogoutResult(LogoutOutcome.ALREADY_LOGGED_OUT)

            record = await self.refresh_tokens.find_by_id(refresh_token_id)
            if not record:
                return LogoutResult(LogoutOutcome.ALREADY_LOGGED_OUT)

            if not refresh_token_matches(refresh_token, record["refresh_token_hash"]):
                log_warning("Logout with mismatched refresh token", extra={"refresh_token_id": refresh_token_id})
                return LogoutResult(LogoutOutcome.TOKEN_MISMATCH)

            await self.refresh_tokens.delete(refresh_token_id)
            return LogoutResult(LogoutOutcome.LOGGED_OUT)

        return await self.execute(operation, context)
