# File: common/security/cookies.py

from fastapi import Response

from common.config.settings import settings

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"
REFRESH_TOKEN_ID_COOKIE = "refresh_token_id"

SESSION_COOKIES = (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, REFRESH_TOKEN_ID_COOKIE)


def _set_cookie(response: Response, key: str, value: str, max_age: int):
    response.set_cookie(
        key=key,
        value=value,
        max_age=max_age,
        httponly=True,
        samesite="strict",
        secure=settings.is_production,
    )


def set_access_cookie(response: Response, access_token: str):
    _set_cookie(response, ACCESS_TOKEN_COOKIE, access_token, settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60)


def set_session_cookies(response: Response, access_token: str, refresh_token: str, refresh_token_id: str):
    refresh_max_age = settings.REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60
    set_access_cookie(response, access_token)
    _set_cookie(response, REFRESH_TOKEN_COOKIE, refresh_token, refresh_max_age)
    _set_cookie(response, REFRESH_TOKEN_ID_COOKIE, refresh_token_id, refresh_max_age)


def clear_session_cookies(response: Response):
    for key in SESSION_COOKIES:
        response.delete_cookie(key, httponly=True, samesite="strict", secure=settings.is_production)
