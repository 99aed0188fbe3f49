import pytest
from starlette.requests import Request

from common.exceptions.base_exception import ForbiddenException, UnauthorizedException
from common.security.access_guard import check_role
from common.security.jwt.tokens import TokenService
from domain.admin.entities.admin_entity import AdminPayload, AdminRole
from domain.admin.entities.auth_results import GuardOutcome
from domain.admin.services.access_guard import extract_token
from tests.fakes import ADMIN_PASSWORD, make_admin


async def grant(auth_service, db, mailer, **admin_fields):
    admin_id = make_admin(db, **admin_fields)
    login = await auth_service.login(admin_fields.get("email", "admin@example.com"), ADMIN_PASSWORD)
    verified = await auth_service.verify_otp(login.session_id, mailer.last_otp)
    return admin_id, verified


def expired_token(admin_id):
    service = TokenService("test-secret-key", access_ttl_seconds=-60)
    return "Bearer " + service.issue_access_token(
        {"id": admin_id, "role": "ADMIN", "first_name": "Sara", "last_name": "Karimi"}
    )


def test_extract_token_accepts_raw_and_prefixed_values():
    assert extract_token("Bearer abc.def") == "abc.def"
    assert extract_token("abc.def") == "abc.def"
    assert extract_token("") == ""
    assert extract_token(None) == ""


async def test_valid_access_token_authenticates(guard, auth_service, db, mailer):
    admin_id, verified = await grant(auth_service, db, mailer)

    for cookie in (verified.access_token, verified.access_token.split(" ", 1)[1]):
        result = await guard.authenticate(cookie)
        assert result.outcome is GuardOutcome.AUTHENTICATED
        assert result.principal.id == admin_id
        assert result.refreshed_access_token is None


async def test_missing_access_token_is_denied(guard):
    result = await guard.authenticate(None, "token", "id")

    assert result.outcome is GuardOutcome.MISSING_TOKEN
    with pytest.raises(UnauthorizedException) as exc:
        result.raise_for_status()
    assert exc.value.detail == "Access denied"


async def test_expired_access_token_is_silently_refreshed(guard, auth_service, db, mailer, token_service):
    admin_id, verified = await grant(auth_service, db, mailer, role="SUPER_ADMIN")
    rows_before = dict(db.refresh_tokens)

    result = await guard.authenticate(
        expired_token(admin_id), verified.refresh_token.token, verified.refresh_token.id
    )

    assert result.outcome is GuardOutcome.REFRESHED
    assert result.principal.id == admin_id
    assert result.principal.role is AdminRole.SUPER_ADMIN
    new_claims = token_service.verify_access_token(extract_token(result.refreshed_access_token))
    assert new_claims["id"] == admin_id
    # the refresh token is not rotated
    assert db.refresh_tokens == rows_before


async def test_refresh_with_wrong_token_is_denied(guard, auth_service, db, mailer):
    admin_id, verified = await grant(auth_service, db, mailer)

    result = await guard.authenticate("Bearer garbage", "wrong.token", verified.refresh_token.id)

    assert result.outcome is GuardOutcome.REFRESH_MISMATCH
    assert not result.ok


async def test_refresh_needs_both_cookies(guard, auth_service, db, mailer):
    admin_id, verified = await grant(auth_service, db, mailer)

    assert (await guard.authenticate("Bearer garbage", verified.refresh_token.token, None)).outcome is GuardOutcome.REFRESH_MISSING
    assert (await guard.authenticate("Bearer garbage", None, verified.refresh_token.id)).outcome is GuardOutcome.REFRESH_MISSING
    assert (await guard.authenticate("Bearer garbage", "x", "unknown-id")).outcome is GuardOutcome.REFRESH_NOT_FOUND


async def test_expired_refresh_token_is_deleted(guard, auth_service, db, mailer, clock):
    admin_id, verified = await grant(auth_service, db, mailer)
    clock.advance(days=8)

    result = await guard.authenticate(
        expired_token(admin_id), verified.refresh_token.token, verified.refresh_token.id
    )

    assert result.outcome is GuardOutcome.REFRESH_EXPIRED
    assert verified.refresh_token.id not in db.refresh_tokens


async def test_refresh_for_deleted_admin_is_denied(guard, auth_service, db, mailer):
    admin_id, verified = await grant(auth_service, db, mailer)
    del db.admins[admin_id]

    result = await guard.authenticate(
        expired_token(admin_id), verified.refresh_token.token, verified.refresh_token.id
    )

    assert result.outcome is GuardOutcome.ADMIN_NOT_FOUND


def make_request(admin=None):
    request = Request({"type": "http", "method": "GET", "path": "/", "headers": []})
    if admin is not None:
        request.state.admin = admin
    return request


def test_role_gates():
    admin = AdminPayload(id="a", role=AdminRole.ADMIN, first_name="Sara", last_name="Karimi")
    super_admin = AdminPayload(id="s", role=AdminRole.SUPER_ADMIN, first_name="Ali", last_name="Rezaei")

    assert check_role(make_request(admin), (AdminRole.ADMIN, AdminRole.SUPER_ADMIN)) is admin
    assert check_role(make_request(super_admin), (AdminRole.SUPER_ADMIN,)) is super_admin

    with pytest.raises(UnauthorizedException):
        check_role(make_request(), (AdminRole.ADMIN,))
    with pytest.raises(ForbiddenException) as exc:
        check_role(make_request(admin), (AdminRole.SUPER_ADMIN,))
    assert exc.value.status_code == 403
    assert exc.value.detail == "Access denied"
