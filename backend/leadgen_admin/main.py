"""Main FastAPI application."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from leadgen_admin import __version__
from leadgen_admin.config import settings
from leadgen_admin.database import Base, init_models
from leadgen_admin.errors import AppError
from leadgen_admin.routers import integration_routes, lead_routes, setup_routes

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Lead Generation Admin API",
    description="Integration configuration, setup wizard and lead management",
    version=__version__,
    redirect_slashes=False
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================
# ERROR HANDLERS
# ============================================

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed requests are client errors: 400, not FastAPI's default 422."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query"))
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    
    logger.warning(f"{request.method} {request.url.path} -> 400: {'; '.join(messages)}")
    return _error(400, "; ".join(messages) or "Invalid request")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _error(500, "Internal server error")


# ============================================
# ROUTER REGISTRATION
# ============================================

app.include_router(integration_routes.router, prefix=settings.API_PREFIX)
app.include_router(setup_routes.router, prefix=settings.API_PREFIX)
app.include_router(lead_routes.router, prefix=settings.API_PREFIX)


# ============================================
# HEALTH & ROOT ENDPOINTS
# ============================================

@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": __version__,
        "tables": sorted(Base.metadata.tables.keys()),
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Lead Generation Admin API",
        "version": __version__,
        "docs": "/docs",
        "health": "/health"
    }


# ============================================
# STARTUP
# ============================================

@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info("Starting Lead Generation Admin API...")
    await init_models()
    logger.info(f"Registered {len(Base.metadata.tables)} tables: {', '.join(sorted(Base.metadata.tables))}")
    logger.info("Application started successfully!")
