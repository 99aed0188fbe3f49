import asyncio
import inspect
import os

# settings are read at import time
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("MOCK_EMAIL", "true")
os.environ.setdefault("MONGO_USE_TRANSACTIONS", "false")
os.environ.setdefault("SENTRY_DSN", "")
os.environ.setdefault("SUPER_ADMIN_EMAIL", "")

import pytest  # noqa: E402

from common.security.jwt.tokens import TokenService  # noqa: E402
from domain.admin.services.access_guard import AccessGuard  # noqa: E402
from domain.admin.services.admin_service import AdminService  # noqa: E402
from domain.admin.services.auth_service import AdminAuthService  # noqa: E402
from domain.categories.services.category_service import CategoryService  # noqa: E402
from tests.fakes import (  # noqa: E402
    FakeAdminRepository,
    FakeCache,
    FakeCategoryRepository,
    FakeClock,
    FakeMailer,
    FakeRefreshTokenRepository,
    FakeSessionRepository,
    InMemoryDatabase,
)

def pytest_pyfunc_call(pyfuncitem):
    if inspect.iscoroutinefunction(pyfuncitem.obj):
        call_kwargs = {
            name: pyfuncitem.funcargs[name]
            for name in pyfuncitem._fixtureinfo.argnames
            if name in pyfuncitem.funcargs
        }
        asyncio.run(pyfuncitem.obj(**call_kwargs))
        return True
    return None


@pytest.fixture
def db():
    return InMemoryDatabase()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def token_service():
    return TokenService("test-secret-key", access_ttl_seconds=3600)


@pytest.fixture
def admins(db):
    return FakeAdminRepository(db)


@pytest.fixture
def sessions(db):
    return FakeSessionRepository(db)


@pytest.fixture
def refresh_tokens(db):
    return FakeRefreshTokenRepository(db)


@pytest.fixture
def auth_service(db, admins, sessions, refresh_tokens, token_service, mailer, clock):
    return AdminAuthService(
        admins=admins,
        sessions=sessions,
        refresh_tokens=refresh_tokens,
        token_service=token_service,
        mailer=mailer,
        transaction=db.transaction,
        clock=clock,
        otp_ttl_minutes=5,
        max_attempts=5,
        max_refresh_tokens=5,
        refresh_ttl_days=7,
    )


@pytest.fixture
def guard(token_service, admins, refresh_tokens, clock):
    return AccessGuard(token_service=token_service, admins=admins, refresh_tokens=refresh_tokens, clock=clock)


@pytest.fixture
def admin_service(db, admins, sessions, refresh_tokens):
    return AdminService(admins, sessions, refresh_tokens, transaction=db.transaction)


@pytest.fixture
def cache():
    return FakeCache()


@pytest.fixture
def categories(db):
    return FakeCategoryRepository(db)


@pytest.fixture
def category_service(categories, cache):
    return CategoryService(categories, cache, cache_ttl=60)
