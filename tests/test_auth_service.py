import asyncio

import pytest

from common.config.settings import settings
from common.exceptions.base_exception import (
    NotFoundException,
    ServiceUnavailableException,
    UnauthorizedException,
)
from common.security.jwt.tokens import hash_refresh_token
from domain.admin.entities.auth_results import LoginOutcome, LogoutOutcome, VerifyOtpOutcome
from infrastructure.database.mongodb.connection import MongoDBConnection
from tests.fakes import ADMIN_PASSWORD, FakeMailer, make_admin


async def login_and_verify(auth_service, mailer, email="admin@example.com"):
    login = await auth_service.login(email, ADMIN_PASSWORD)
    assert login.ok
    return await auth_service.verify_otp(login.session_id, mailer.last_otp)


async def test_login_creates_session_and_emails_otp(auth_service, db, mailer, clock):
    admin_id = make_admin(db)

    result = await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    assert result.outcome is LoginOutcome.OK
    assert result.to_response() == {"session_id": result.session_id, "email": "admin@example.com"}
    session = db.sessions[result.session_id]
    assert session["admin_id"] == admin_id
    assert session["attempts"] == 0
    assert (session["expires_at"] - clock()).total_seconds() == 300
    otp = mailer.last_otp
    assert len(otp) == 6 and otp.isdigit() and 100000 <= int(otp) <= 999999
    assert session["otp_hash"] != otp


async def test_unknown_email_and_wrong_password_look_the_same(auth_service, db):
    make_admin(db)

    unknown = await auth_service.login("nobody@example.com", ADMIN_PASSWORD)
    wrong = await auth_service.login("admin@example.com", "WrongPassword1")

    assert unknown.outcome is wrong.outcome is LoginOutcome.INVALID_CREDENTIALS
    for result in (unknown, wrong):
        with pytest.raises(UnauthorizedException) as exc:
            result.raise_for_status()
        assert exc.value.detail == "Invalid credentials"
    assert db.sessions == {}


async def test_second_login_while_session_live_is_rejected(auth_service, db, mailer):
    make_admin(db)
    first = await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    second = await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    assert first.ok
    assert second.outcome is LoginOutcome.SESSION_PENDING
    with pytest.raises(UnauthorizedException) as exc:
        second.raise_for_status()
    assert exc.value.status_code == 401
    assert exc.value.detail == "Session already exists and not expired"
    assert list(db.sessions) == [first.session_id]
    assert len(mailer.sent) == 1


async def test_login_replaces_expired_session(auth_service, db, clock):
    make_admin(db)
    first = await auth_service.login("admin@example.com", ADMIN_PASSWORD)
    clock.advance(minutes=6)

    second = await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    assert second.ok
    assert list(db.sessions) == [second.session_id]
    assert first.session_id not in db.sessions


async def test_email_failure_leaves_no_session(db, auth_service):
    make_admin(db)
    auth_service.mailer = FakeMailer(fail=True)

    with pytest.raises(ServiceUnavailableException):
        await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    assert db.sessions == {}
    assert db.rollbacks == 1


async def test_concurrent_insert_conflict_reports_pending_session(auth_service, db, sessions):
    admin_id = make_admin(db)
    real_find = sessions.find_by_admin

    async def racing_find(found_admin_id):
        # another request inserts between the check and our insert
        result = await real_find(found_admin_id)
        await sessions.insert(found_admin_id, "other-hash", auth_service.clock())
        return result

    sessions.find_by_admin = racing_find

    result = await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    assert result.outcome is LoginOutcome.SESSION_PENDING
    assert [s["admin_id"] for s in db.sessions.values()] == [admin_id]


async def test_verify_otp_issues_tokens_and_consumes_session(auth_service, db, mailer, token_service, clock):
    admin_id = make_admin(db)
    login = await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    result = await auth_service.verify_otp(login.session_id, mailer.last_otp)

    assert result.outcome is VerifyOtpOutcome.VERIFIED
    assert login.session_id not in db.sessions
    assert result.access_token.startswith("Bearer ")
    claims = token_service.verify_access_token(result.access_token.split(" ", 1)[1])
    assert claims["id"] == admin_id
    assert claims["role"] == "ADMIN"

    record = db.refresh_tokens[result.refresh_token.id]
    assert record["admin_id"] == admin_id
    assert record["refresh_token_hash"] == hash_refresh_token(result.refresh_token.token)
    assert (record["expires_at"] - clock()).days == 7

    body = result.to_response()
    assert body["id"] == admin_id
    assert body["email"] == "admin@example.com"
    assert "password_hash" not in body
    assert body["refresh_token"]["token"] == result.refresh_token.token


async def test_replaying_a_used_otp_is_not_found(auth_service, db, mailer):
    make_admin(db)
    login = await auth_service.login("admin@example.com", ADMIN_PASSWORD)
    otp = mailer.last_otp
    await auth_service.verify_otp(login.session_id, otp)

    replay = await auth_service.verify_otp(login.session_id, otp)

    assert replay.outcome is VerifyOtpOutcome.SESSION_NOT_FOUND
    with pytest.raises(NotFoundException) as exc:
        replay.raise_for_status()
    assert exc.value.detail == "Session not found"


async def test_expired_session_is_deleted_even_with_correct_otp(auth_service, db, mailer, clock):
    make_admin(db)
    login = await auth_service.login("admin@example.com", ADMIN_PASSWORD)
    clock.advance(minutes=5, seconds=1)

    result = await auth_service.verify_otp(login.session_id, mailer.last_otp)

    assert result.outcome is VerifyOtpOutcome.SESSION_EXPIRED
    assert db.sessions == {}
    with pytest.raises(UnauthorizedException) as exc:
        result.raise_for_status()
    assert exc.value.detail == "Session expired"


async def test_five_wrong_otps_exhaust_the_session(auth_service, db, mailer):
    make_admin(db)
    login = await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    outcomes = [(await auth_service.verify_otp(login.session_id, "000000")).outcome for _ in range(5)]

    assert outcomes[:4] == [VerifyOtpOutcome.INVALID_OTP] * 4
    assert outcomes[4] is VerifyOtpOutcome.ATTEMPTS_EXHAUSTED
    assert db.sessions == {}

    sixth = await auth_service.verify_otp(login.session_id, mailer.last_otp)
    assert sixth.outcome is VerifyOtpOutcome.SESSION_NOT_FOUND


async def test_wrong_otp_messages(auth_service, db):
    make_admin(db)
    login = await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    messages = []
    for _ in range(5):
        result = await auth_service.verify_otp(login.session_id, "000000")
        with pytest.raises(UnauthorizedException) as exc:
            result.raise_for_status()
        messages.append(exc.value.detail)

    assert messages == ["Invalid OTP"] * 4 + ["Max attempts reached"]


async def test_session_already_at_max_attempts_is_rejected(auth_service, db, mailer):
    make_admin(db)
    login = await auth_service.login("admin@example.com", ADMIN_PASSWORD)
    db.sessions[login.session_id]["attempts"] = 5

    result = await auth_service.verify_otp(login.session_id, mailer.last_otp)

    assert result.outcome is VerifyOtpOutcome.ATTEMPTS_EXHAUSTED
    assert db.sessions == {}


async def test_missing_admin_rolls_back_session_delete(auth_service, db, mailer):
    admin_id = make_admin(db)
    login = await auth_service.login("admin@example.com", ADMIN_PASSWORD)
    del db.admins[admin_id]

    result = await auth_service.verify_otp(login.session_id, mailer.last_otp)

    assert result.outcome is VerifyOtpOutcome.ADMIN_NOT_FOUND
    assert login.session_id in db.sessions
    assert db.refresh_tokens == {}
    with pytest.raises(NotFoundException) as exc:
        result.raise_for_status()
    assert exc.value.detail == "Admin not found"


async def test_sixth_grant_resets_refresh_tokens(auth_service, db, mailer, refresh_tokens):
    admin_id = make_admin(db)
    other_id = make_admin(db, email="other@example.com", phone="+989121234567")

    grants = [await login_and_verify(auth_service, mailer) for _ in range(5)]
    await login_and_verify(auth_service, mailer, email="other@example.com")
    assert len(refresh_tokens.rows_for(admin_id)) == 5

    sixth = await login_and_verify(auth_service, mailer)

    rows = refresh_tokens.rows_for(admin_id)
    assert [row["_id"] for row in rows] == [sixth.refresh_token.id]
    assert all(grant.refresh_token.id not in db.refresh_tokens for grant in grants)
    assert len(refresh_tokens.rows_for(other_id)) == 1


async def test_logout_is_idempotent(auth_service, db, mailer):
    make_admin(db)
    grant = await login_and_verify(auth_service, mailer)
    token_id, token = grant.refresh_token.id, grant.refresh_token.token

    first = await auth_service.logout(token_id, token)
    second = await auth_service.logout(token_id, token)

    assert first.outcome is LogoutOutcome.LOGGED_OUT and first.revoked
    assert second.outcome is LogoutOutcome.ALREADY_LOGGED_OUT and not second.revoked
    assert token_id not in db.refresh_tokens


async def test_logout_with_mismatched_token_keeps_row(auth_service, db, mailer):
    make_admin(db)
    grant = await login_and_verify(auth_service, mailer)

    result = await auth_service.logout(grant.refresh_token.id, "forged.token")
    missing = await auth_service.logout(None, None)

    assert result.outcome is LogoutOutcome.TOKEN_MISMATCH
    assert missing.outcome is LogoutOutcome.ALREADY_LOGGED_OUT
    assert grant.refresh_token.id in db.refresh_tokens


async def test_email_failure_without_transactions_removes_session(auth_service, db, monkeypatch):
    monkeypatch.setattr(settings, "MONGO_USE_TRANSACTIONS", False)
    make_admin(db)
    auth_service.transaction = MongoDBConnection.transaction
    auth_service.mailer = FakeMailer(fail=True)

    with pytest.raises(ServiceUnavailableException):
        await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    assert db.sessions == {}
    auth_service.mailer = FakeMailer()
    retry = await auth_service.login("admin@example.com", ADMIN_PASSWORD)
    assert retry.outcome is LoginOutcome.OK


async def test_concurrent_verifications_use_the_otp_once(auth_service, db, mailer):
    make_admin(db)
    login = await auth_service.login("admin@example.com", ADMIN_PASSWORD)
    otp = mailer.last_otp

    first, second = await asyncio.gather(
        auth_service.verify_otp(login.session_id, otp),
        auth_service.verify_otp(login.session_id, otp),
    )

    assert {first.outcome, second.outcome} == {VerifyOtpOutcome.VERIFIED, VerifyOtpOutcome.SESSION_NOT_FOUND}
    assert len(db.refresh_tokens) == 1
    assert db.sessions == {}


async def test_session_gone_before_attempt_is_counted_is_not_found(auth_service, db, sessions):
    make_admin(db)
    login = await auth_service.login("admin@example.com", ADMIN_PASSWORD)

    async def consumed_meanwhile(session_id):
        await sessions.delete(session_id)
        return None

    sessions.increment_attempts = consumed_meanwhile

    result = await auth_service.verify_otp(login.session_id, "000000")

    assert result.outcome is VerifyOtpOutcome.SESSION_NOT_FOUND
