import logging
import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

# Import all models to ensure they're registered with SQLAlchemy Base
from . import (
    __version__,
    models,  # noqa: F401
    models_attendance,  # noqa: F401
    models_billing,  # noqa: F401
    models_inventory,  # noqa: F401
)
from .config import ALLOWED_ORIGINS, ENVIRONMENT
from .database import Base, engine, get_db
from .domain.admin.router import router as admin_router
from .domain.appointments.router import router as appointments_router
from .domain.attendance.admin_router import router as admin_attendance_router
from .domain.attendance.router import router as attendance_router
from .domain.auth.router import router as auth_router
from .domain.billing.router import router as billing_router
from .domain.catalog.router import router as services_router
from .domain.coupons.router import router as coupons_router
from .domain.customers.router import router as customers_router
from .domain.demo_requests.router import router as demo_requests_router
from .domain.inventory.router import router as inventory_router
from .domain.notifications.router import router as notifications_router
from .domain.payments.router import router as payments_router
from .domain.payments.router import webhook_router as razorpay_webhook_router
from .domain.products.router import router as products_router
from .domain.reports.router import router as reports_router
from .domain.salon.router import router as salon_router
from .domain.staff.router import router as staff_router
from .domain.suppliers.router import router as suppliers_router
from .rate_limiter import get_redis_client
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("botocore").setLevel(logging.WARNING)

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
STARTED_AT = time.time()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Another worker may have created the tables first
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    if get_redis_client():
        logger.info("Redis connection established")
    else:
        logger.warning("Redis unavailable - rate limiting uses the in-memory fallback")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="SalonX API", version=__version__, lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON bodies become 400 like the other input errors; schema errors stay 422"""
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        logger.warning(f"Invalid JSON body for {request.url.path}")
        return JSONResponse(status_code=400, content={"detail": "Invalid JSON body"})

    logger.warning(f"Validation error for {request.url.path}: {errors}")
    return JSONResponse(status_code=422, content={"detail": errors})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise
    duration_ms = (time.time() - start_time) * 1000
    if duration_ms > 1000:
        logger.warning(f"🐢 Slow request {request.method} {request.url.path}: {duration_ms:.0f}ms")
    return response


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

# Routes
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(admin_attendance_router)
app.include_router(salon_router)
app.include_router(customers_router)
app.include_router(staff_router)
app.include_router(services_router)
app.include_router(appointments_router)
app.include_router(products_router)
app.include_router(suppliers_router)
app.include_router(inventory_router)
app.include_router(billing_router)
app.include_router(coupons_router)
app.include_router(attendance_router)
app.include_router(reports_router)
app.include_router(notifications_router)
app.include_router(demo_requests_router)
app.include_router(payments_router)
app.include_router(razorpay_webhook_router)


@app.get("/")
def root():
    return {"message": "SalonX API is running"}


@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Liveness plus a database round-trip"""
    started = time.time()
    database = {"status": "healthy", "latency_ms": None}
    try:
        check_start = time.time()
        db.execute(text("SELECT 1"))
        database["latency_ms"] = round((time.time() - check_start) * 1000, 2)
    except Exception as e:
        logger.error(f"❌ Health check database query failed: {e}")
        database = {"status": "unhealthy", "latency_ms": None, "error": str(e)}

    healthy = database["status"] == "healthy"
    body = {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": round(time.time() - STARTED_AT, 1),
        "version": __version__,
        "environment": ENVIRONMENT,
        "database": database,
        "responseTime_ms": round((time.time() - started) * 1000, 2),
    }
    return JSONResponse(status_code=200 if healthy else 503, content=body)


@app.get("/health/redis")
async def redis_health_check():
    """Check Redis connectivity for monitoring"""
    redis_client = get_redis_client()
    if redis_client is None:
        return {"status": "unavailable", "redis": {"connected": False, "fallback": "memory"}}

    try:
        start_time = time.time()
        redis_client.ping()
        response_time = (time.time() - start_time) * 1000
        info = redis_client.info()
        return {
            "status": "healthy",
            "redis": {
                "connected": True,
                "response_time_ms": round(response_time, 2),
                "version": info.get("redis_version", "unknown"),
                "used_memory_human": info.get("used_memory_human", "unknown"),
                "connected_clients": info.get("connected_clients", 0),
            },
        }
    except Exception as e:
        return {"status": "unhealthy", "redis": {"connected": False, "error": str(e)}}
