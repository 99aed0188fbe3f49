"""Outcome types of the admin authentication flow.

Every step of login, OTP verification, logout and request authentication
returns one of these results instead of raising on the spot. Routers call
``raise_for_status`` to turn a failure outcome into the HTTP exception the
API exposes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from common.exceptions.base_exception import (
    AppHTTPException,
    NotFoundException,
    UnauthorizedException,
)
from domain.admin.entities.admin_entity import AdminPayload


class LoginOutcome(str, Enum):
    OK = "ok"
    INVALID_CREDENTIALS = "invalid_credentials"
    SESSION_PENDING = "session_pending"


class VerifyOtpOutcome(str, Enum):
    VERIFIED = "verified"
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_EXPIRED = "session_expired"
    ATTEMPTS_EXHAUSTED = "attempts_exhausted"
    INVALID_OTP = "invalid_otp"
    ADMIN_NOT_FOUND = "admin_not_found"


class LogoutOutcome(str, Enum):
    LOGGED_OUT = "logged_out"
    ALREADY_LOGGED_OUT = "already_logged_out"
    TOKEN_MISMATCH = "token_mismatch"


class GuardOutcome(str, Enum):
    AUTHENTICATED = "authenticated"
    REFRESHED = "refreshed"
    MISSING_TOKEN = "missing_token"
    REFRESH_MISSING = "refresh_missing"
    REFRESH_NOT_FOUND = "refresh_not_found"
    REFRESH_MISMATCH = "refresh_mismatch"
    REFRESH_EXPIRED = "refresh_expired"
    ADMIN_NOT_FOUND = "admin_not_found"


LOGIN_ERRORS = {
    LoginOutcome.INVALID_CREDENTIALS: lambda: UnauthorizedException("Invalid credentials"),
    LoginOutcome.SESSION_PENDING: lambda: UnauthorizedException("Session already exists and not expired"),
}

VERIFY_OTP_ERRORS = {
    VerifyOtpOutcome.SESSION_NOT_FOUND: lambda: NotFoundException("Session not found"),
    VerifyOtpOutcome.SESSION_EXPIRED: lambda: UnauthorizedException("Session expired"),
    VerifyOtpOutcome.ATTEMPTS_EXHAUSTED: lambda: UnauthorizedException("Max attempts reached"),
    VerifyOtpOutcome.INVALID_OTP: lambda: UnauthorizedException("Invalid OTP"),
    VerifyOtpOutcome.ADMIN_NOT_FOUND: lambda: NotFoundException("Admin not found"),
}


def _raise_mapped(outcome: Enum, errors: Dict[Enum, Any]) -> None:
    factory = errors.get(outcome)
    if factory is not None:
        exc: AppHTTPException = factory()
        raise exc


@dataclass(frozen=True)
class LoginResult:
    outcome: LoginOutcome
    session_id: Optional[str] = None
    email: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is LoginOutcome.OK

    def raise_for_status(self) -> None:
        _raise_mapped(self.outcome, LOGIN_ERRORS)

    def to_response(self) -> Dict[str, Any]:
        return {"session_id": self.session_id, "email": self.email}


@dataclass(frozen=True)
class IssuedRefreshToken:
    id: str
    token: str
    expires_at: Any


@dataclass(frozen=True)
class VerifyOtpResult:
    outcome: VerifyOtpOutcome
    admin: Optional[Dict[str, Any]] = None
    access_token: Optional[str] = None
    refresh_token: Optional[IssuedRefreshToken] = None

    @property
    def ok(self) -> bool:
        return self.outcome is VerifyOtpOutcome.VERIFIED

    def raise_for_status(self) -> None:
        _raise_mapped(self.outcome, VERIFY_OTP_ERRORS)

    def to_response(self) -> Dict[str, Any]:
        return {
            **(self.admin or {}),
            "access_token": self.access_token,
            "refresh_token": {
                "id": self.refresh_token.id,
                "token": self.refresh_token.token,
                "expires_at": self.refresh_token.expires_at,
            } if self.refresh_token else None,
        }


@dataclass(frozen=True)
class LogoutResult:
    """Logout never fails from the caller's point of view."""

    outcome: LogoutOutcome

    @property
    def revoked(self) -> bool:
        return self.outcome is LogoutOutcome.LOGGED_OUT


@dataclass(frozen=True)
class GuardResult:
    outcome: GuardOutcome
    principal: Optional[AdminPayload] = None
    refreshed_access_token: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome in (GuardOutcome.AUTHENTICATED, GuardOutcome.REFRESHED)

    def raise_for_status(self) -> None:
        # every guard failure looks the same from outside
        if not self.ok:
            raise UnauthorizedException("Access denied")
