"""
Main FastAPI application
"""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config.logging_config import setup_logging
from app.config.settings import settings
from app.database.factory import start_context, stop_context
from app.routes import form
from app.utils.errors import InternalError
from app.utils.responses import build_response, error_response, to_http_response

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown events"""
    # Startup
    app.state.handler_context = await start_context()
    print(f"🚀 {settings.APP_NAME} v{settings.VERSION} started ({settings.STORAGE_BACKEND} storage)")
    yield
    # Shutdown
    await stop_context()
    print("👋 Application shutdown")

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    lifespan=lifespan
)

# Errors raised outside the handlers (unknown paths, framework errors) still
# get the JSON envelope
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return to_http_response(build_response(exc.status_code, {"error": str(exc.detail)}))

@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return to_http_response(error_response(InternalError()))

@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time
    logger.info("%s %s - %s (%.2fs)", request.method, request.url.path, response.status_code, duration)
    return response

# Include routers
app.include_router(form.router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "app": settings.APP_NAME,
        "version": settings.VERSION,
        "status": "running"
    }

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return to_http_response(build_response(200, {
        "status": "healthy",
        "storage": settings.STORAGE_BACKEND,
    }))
