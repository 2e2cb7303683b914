"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from urbanstay.config import settings
from urbanstay.database import lifespan_db
from urbanstay.utils.logging import get_logger, setup_logging

# Setup logging
setup_logging(debug=settings.debug)
logger = get_logger("main")

# Import routers
from urbanstay.api import (  # noqa: E402
    admin_router,
    alerts_router,
    auth_router,
    bookings_router,
    inquiries_router,
    properties_router,
    reviews_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("startup", app=settings.app_name, version=settings.app_version)
    async with lifespan_db():
        yield
    logger.info("shutdown")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Real estate marketplace API",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(p) for p in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "message": "Validation failed", "errors": errors},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        error_type=type(exc).__name__,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Server error"},
    )


# Include routers
app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(properties_router, prefix="/api/properties", tags=["Properties"])
app.include_router(alerts_router, prefix="/api/alerts", tags=["Alerts"])
app.include_router(inquiries_router, prefix="/api/inquiries", tags=["Inquiries"])
app.include_router(reviews_router, prefix="/api/reviews", tags=["Reviews"])
app.include_router(bookings_router, prefix="/api/bookings", tags=["Bookings"])
app.include_router(admin_router, prefix="/api/admin", tags=["Admin"])


@app.get("/", tags=["Health"])
async def root():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
    }


@app.get("/api/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "success": True,
        "status": "healthy",
        "database": "sqlite" if settings.is_sqlite else "external",
    }
