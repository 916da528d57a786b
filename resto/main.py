"""
Resto Reservations - FastAPI Backend Application
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
import structlog

from resto.config import settings
from resto.api import cron, reservations, restaurants
from resto.booking.errors import NoSuitableTable, PaymentError, ReservationError, ValidationError

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting Resto Reservations API", version="1.0.0")
    yield
    logger.info("Shutting down Resto Reservations API")


# Create FastAPI application
app = FastAPI(
    title="Resto Reservations",
    description="Table availability and reservation lifecycle for restaurants",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ReservationError)
async def reservation_error_handler(request: Request, exc: ReservationError):
    content = {"detail": exc.detail, "error_code": exc.error_code}
    if isinstance(exc, ValidationError):
        content["errors"] = exc.errors
    elif isinstance(exc, NoSuitableTable):
        content["max_capacity"] = exc.max_capacity
    elif isinstance(exc, PaymentError) and exc.amount_too_small:
        content["amount_too_small"] = True

    if exc.status_code >= 500:
        logger.error("Reservation request failed", path=request.url.path, error_code=exc.error_code)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    error = ValidationError.from_pydantic(exc.errors())
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.detail, "error_code": error.error_code, "errors": error.errors},
    )


# Health check endpoints
@app.get("/health")
async def health():
    """Basic health check"""
    return {"status": "healthy", "service": "api", "version": "1.0.0"}


@app.get("/health/ready")
async def ready():
    """Readiness check with dependency verification"""
    from resto.database import SessionLocal

    checks = {}

    # Check database
    try:
        async with SessionLocal() as db:
            await db.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except Exception as e:
        checks["database"] = f"failed: {str(e)}"

    # Check Redis
    try:
        from resto.jobs.celery_app import celery_app
        celery_app.control.ping(timeout=1)
        checks["redis"] = "ok"
    except Exception as e:
        checks["redis"] = f"failed: {str(e)}"

    all_ok = all(v == "ok" for v in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
    }


# Include API routers
app.include_router(restaurants.router, prefix="/restaurants", tags=["Restaurants"])
app.include_router(reservations.router, prefix="/reservations", tags=["Reservations"])
app.include_router(cron.router, prefix="/cron", tags=["Cron"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "resto.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_debug,
    )
