# File: main.py

from contextlib import asynccontextmanager

import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sentry_sdk.integrations.fastapi import FastApiIntegration

from api.middleware.error_middleware import ErrorLoggingMiddleware
from api.routers.all_endpoints import all_routers
from common.config.settings import settings
from common.dependencies.services import get_token_service
from common.exceptions.exception_handlers import register_exception_handlers
from common.logging.logger import log_info, log_error
from infrastructure.database.mongodb.connection import MongoDBConnection, ensure_indexes
from infrastructure.database.mongodb.repositories.admin_repository import AdminRepository
from infrastructure.database.redis.redis_client import init_redis_pool, close_redis_pool
from infrastructure.setup.initial_setup import setup_super_admin

# Load environment variables
load_dotenv()

# Initialize Sentry
if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        integrations=[FastApiIntegration()],
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        environment=settings.ENVIRONMENT,
        send_default_pii=settings.SENTRY_SEND_PII
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup tasks
    try:
        # a missing signing secret must stop the boot
        get_token_service()

        await MongoDBConnection.connect()
        db = MongoDBConnection.get_db()
        await ensure_indexes(db)
        await setup_super_admin(AdminRepository(db))

        await init_redis_pool()

        log_info("Registered routes", extra={"routes": [route.path for route in app.routes]})
        log_info("QV API started", extra={"version": app.version})
    except Exception as e:
        log_error("Startup failed", extra={"error": str(e)})
        sentry_sdk.capture_exception(e)
        raise

    yield  # Application is running

    # Shutdown tasks
    await MongoDBConnection.disconnect()
    await close_redis_pool()
    log_info("QV API stopped")


# Create FastAPI app instance
app = FastAPI(
    title="QV Admin API",
    version="1.0.0",
    description="Admin backend: two-factor admin authentication, admin management and categories.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)


# Request logger middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    log_info("Incoming request", extra={"method": request.method, "path": request.url.path})
    return await call_next(request)

# Register middlewares
app.add_middleware(ErrorLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)

# Register routers
app.include_router(all_routers)
