# File: src/api/routers/admins/auth.py

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field, field_validator

from common.dependencies.services import get_auth_service
from common.logging.logger import log_error, log_info
from common.schemas.standard_response import StandardResponse
from common.security.cookies import (
    REFRESH_TOKEN_COOKIE,
    REFRESH_TOKEN_ID_COOKIE,
    clear_session_cookies,
    set_session_cookies,
)
from common.utils.ip_utils import extract_client_ip
from common.validators.email import validate_admin_email
from domain.admin.services.auth_service import AdminAuthService

router = APIRouter(prefix="/admins", tags=["Admin Authentication"])


class LoginAdminRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255, examples=["admin@example.com"])
    password: str = Field(..., min_length=8, max_length=255)

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return validate_admin_email(value)


class VerifyOtpRequest(BaseModel):
    session_id: UUID = Field(..., description="Session id returned by /admins/login")
    otp: str = Field(..., min_length=6, max_length=6, examples=["123456"])

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


@router.post(
    "/login",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Check admin credentials and email a one-time passcode",
    responses={
        200: {"description": "OTP sent."},
        400: {"description": "Validation failed."},
        401: {"description": "Invalid credentials or a pending session."},
        503: {"description": "Email delivery failed."},
    },
)
async def login(data: LoginAdminRequest, request: Request, service: AdminAuthService = Depends(get_auth_service)):
    client_ip = await extract_client_ip(request)
    result = await service.login(data.email, data.password)
    result.raise_for_status()
    log_info("Admin OTP sent", extra={"session_id": result.session_id, "ip": client_ip, "endpoint": "/admins/login"})
    return StandardResponse.ok("OTP sent to email", result.to_response())


@router.post(
    "/verify-otp",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Verify the passcode and open an admin session",
    responses={
        200: {"description": "OTP verified, session cookies set."},
        400: {"description": "Validation failed."},
        401: {"description": "Expired session, too many attempts or wrong OTP."},
        404: {"description": "Session or admin not found."},
    },
)
async def verify_otp(
    data: VerifyOtpRequest,
    request: Request,
    response: Response,
    service: AdminAuthService = Depends(get_auth_service),
):
    client_ip = await extract_client_ip(request)
    result = await service.verify_otp(str(data.session_id), data.otp)
    result.raise_for_status()

    set_session_cookies(
        response,
        access_token=result.access_token,
        refresh_token=result.refresh_token.token,
        refresh_token_id=result.refresh_token.id,
    )
    log_info("Admin session opened", extra={"session_id": str(data.session_id), "ip": client_ip})
    return StandardResponse.ok("OTP verified", result.to_response())


@router.get(
    "/logout",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Revoke the refresh token and clear the session cookies",
)
async def logout(request: Request, response: Response, service: AdminAuthService = Depends(get_auth_service)):
    try:
        result = await service.logout(
            request.cookies.get(REFRESH_TOKEN_ID_COOKIE),
            request.cookies.get(REFRESH_TOKEN_COOKIE),
        )
        log_info("Admin logout", extra={"outcome": result.outcome.value, "revoked": result.revoked})
    except HTTPException as e:
        # the client is signed out either way; the row expires on its own
        log_error("Admin logout could not revoke refresh token", extra={
            "status_code": e.status_code,
            "error": str(e.detail),
        })
    clear_session_cookies(response)
    return StandardResponse.ok("Logout successful")
