import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

# Import models so every table is registered on Base before create_all
from . import models  # noqa: F401
from .config import ALLOWED_ORIGINS, LOG_LEVEL, TELEGRAM_BOT_TOKEN
from .database import Base, engine, get_db
from .domain.bookings.router import router as bookings_router
from .domain.catalog.router import router as catalog_router
from .domain.clients.router import router as clients_router
from .domain.reports.router import router as reports_router
from .domain.scheduling.availability import InvalidTimeFormat
from .domain.scheduling.router import router as schedule_router
from .domain.telegram.router import router as telegram_router
from .domain.users.router import router as auth_router
from .errors import HTTP_STATUS_BY_KIND, StoreError
from .services.notification_service import TelegramNotifier, build_notifier

# Configure logging
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except OperationalError as e:
        # Ignore "already exists" errors from race conditions between workers
        if "already exists" in str(e):
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    app.state.notifier = build_notifier(TELEGRAM_BOT_TOKEN)
    if isinstance(app.state.notifier, TelegramNotifier):
        bot = await app.state.notifier.client.get_me()
        if bot:
            logger.info(f"🤖 Telegram bot started: @{bot.get('username')}")
        else:
            logger.warning("⚠️ Telegram bot token rejected, notifications will fail")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Salon Booking API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list:
    # pydantic puts the raw exception under ctx for custom validators
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return errors


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    status_code = HTTP_STATUS_BY_KIND[exc.kind]
    logger.warning(f"{request.method} {request.url.path} - {exc.kind.value}: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


@app.exception_handler(OperationalError)
async def database_unavailable_handler(request: Request, exc: OperationalError):
    logger.error(f"❌ Database unavailable for {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"detail": "Database is unavailable"})


@app.exception_handler(InvalidTimeFormat)
async def invalid_time_handler(request: Request, exc: InvalidTimeFormat):
    return JSONResponse(status_code=400, content={"detail": "Invalid time format. Use HH:MM"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    duration_ms = (time.time() - start_time) * 1000
    logger.info(f"{request.method} {request.url.path} - {response.status_code} ({duration_ms:.1f}ms)")
    return response


logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(bookings_router, prefix="/api")
app.include_router(schedule_router, prefix="/api")
app.include_router(clients_router, prefix="/api")
app.include_router(reports_router, prefix="/api")
app.include_router(telegram_router, prefix="/api")


@app.get("/")
def root():
    return {
        "message": "Salon Booking API is running",
        "endpoints": {
            "health": "/api/health",
            "auth": "/api/auth/register, /api/auth/login, /api/auth/admin/login, /api/auth/me",
            "services": "/api/services",
            "bookings": "/api/bookings, /api/bookings/my, /api/bookings/available-times, /api/bookings/all",
            "schedule": "/api/schedule",
            "clients": "/api/clients",
            "reports": "/api/reports/generate, /api/reports/history, /api/reports/{id}/download",
            "telegram": "/api/telegram/link, /api/telegram/check-link/{code}, /api/telegram/unlink",
        },
    }


@app.get("/api/health")
def health(request: Request, db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        database = "Connected"
    except SQLAlchemyError as e:
        logger.error(f"❌ Health check database error: {e}")
        database = "Disconnected"

    notifier = getattr(request.app.state, "notifier", None)
    return {
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": database,
        "telegramBot": "Active" if notifier is not None and notifier.enabled else "Disabled",
    }
