import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from app.core.config import settings
from app.core.database import engine, Base
from app.core.errors import AppError, InternalError, ValidationFailedError
from app.core.scheduler import start_scheduler, stop_scheduler
from app.api.routes import auth, entries, users

# Register models on Base.metadata before create_all
from app.models import entry, user  # noqa: F401

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Create tables if they don't exist
# In production, use migrations (Alembic) instead of create_all
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: start the reminder scheduler
    Shutdown: stop it
    """
    start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="MyDiary API",
    description="Personal diary with daily reminders",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _field_name(loc) -> str:
    # loc looks like ("body", "email") or ("path", "entry_id")
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "path", "query", "header"):
        parts = parts[1:]
    # A bare ("body",) means the payload as a whole
    return ".".join(parts) if parts else "payload"


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Render FastAPI/pydantic validation failures in the same shape as every other error"""
    fields = [
        {
            "field": _field_name(error.get("loc", ())),
            "message": str(error.get("msg", "Invalid value")).removeprefix("Value error, "),
        }
        for error in exc.errors()
    ]
    failure = ValidationFailedError(fields)
    return JSONResponse(status_code=failure.status_code, content=failure.to_dict())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all so unexpected failures still answer with the JSON error shape"""
    # Log the traceback server-side; the client only gets a generic message
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    failure = InternalError()
    return JSONResponse(status_code=failure.status_code, content=failure.to_dict())


app.include_router(auth.router, prefix=API_PREFIX)
app.include_router(entries.router, prefix=API_PREFIX)
app.include_router(users.router, prefix=API_PREFIX)


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {"message": "MyDiary API", "version": "1.0.0"}


@app.get("/health")
async def health():
    """Health check endpoint - used by monitoring/deployment tools"""
    return {"status": "healthy"}
