from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
import firebase_admin
from firebase_admin import credentials
import os

from collabspace.config import settings
from collabspace.database import Base, engine, get_pool_status
from collabspace.exceptions import (
    CollabSpaceError,
    collabspace_error_handler,
    http_exception_handler,
    rate_limit_exceeded_handler,
    request_validation_error_handler,
    unhandled_exception_handler,
)
from collabspace.logging_config import configure_logging
from collabspace.middleware.rate_limit import limiter
from collabspace.middleware.request_id import RequestIDMiddleware
from collabspace import models  # noqa: F401  registers tables on Base.metadata
from collabspace.routers import activity, streaks
from collabspace.utils.logger import get_logger

# Configure logging first
configure_logging()
logger = get_logger(__name__)

# Initialize database tables
Base.metadata.create_all(bind=engine)


def init_firebase():
    """Initialize the Firebase Admin SDK used to verify bearer tokens."""
    if not settings.FIREBASE_ENABLED:
        logger.warning("FIREBASE_ENABLED is false: only X-User-ID authentication will work")
        return None
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    try:
        firebase_json_path = settings.FIREBASE_SERVICE_ACCOUNT_JSON
        if os.path.exists(firebase_json_path):
            cred = credentials.Certificate(firebase_json_path)
            firebase_app = firebase_admin.initialize_app(cred)
            logger.info("Initialized Firebase Admin with provided service account JSON")
        else:
            # Application Default Credentials, e.g. on Cloud Run
            options = {"projectId": settings.FIREBASE_PROJECT_ID} if settings.FIREBASE_PROJECT_ID else None
            firebase_app = firebase_admin.initialize_app(options=options)
            logger.warning(f"FIREBASE_SERVICE_ACCOUNT_JSON not found at {firebase_json_path}. Initialized Firebase with default credentials.")
        return firebase_app
    except Exception as e:
        logger.exception(f"Failed to initialize Firebase Admin SDK: {e}")
        raise


# Conditional docs configuration
if settings.DEBUG:
    docs_config = {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}
    logger.info("DEBUG mode: Swagger docs enabled at /docs")
else:
    docs_config = {"docs_url": None, "redoc_url": None, "openapi_url": None}

app = FastAPI(
    title="CollabSpace API",
    description="Activity and streak tracking for the CollabSpace collaborative workspace",
    version="1.0.0",
    **docs_config
)

# Rate limiting
app.state.limiter = limiter

# Every error leaves as {"success": false, "error": "..."}
app.add_exception_handler(CollabSpaceError, collabspace_error_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

logger.info(f"CORS_ORIGINS: {settings.CORS_ORIGINS}")

# Request ID middleware first for proper request tracing
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(streaks.router)
app.include_router(activity.router)


@app.on_event("startup")
async def startup_event():
    """Per-worker initialization (Gunicorn/Uvicorn workers each run this)."""
    init_firebase()
    logger.info(f"CollabSpace API started ({'DEBUG' if settings.DEBUG else 'PRODUCTION'} mode)")


@app.get("/")
async def root():
    return {"message": "CollabSpace API", "version": "1.0.0"}


@app.get("/health")
async def health_check():
    """Health check endpoint for load balancers and monitoring."""
    return {"status": "healthy", "service": "collabspace-api", "database_pool": get_pool_status()}
