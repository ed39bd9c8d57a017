"""
FastAPI entrypoint for the Fintrack backend application.
"""
import logging
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from fintrack.core.config import settings
from fintrack.core.exceptions import AppError, StoreFailure, ValidationFailed
from fintrack.core.log import configure_logging
from fintrack.core.utils import format_error
from fintrack.api.router import api_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Fintrack API",
    description="Backend API for personal income and expense tracking",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _field_errors(exc: RequestValidationError) -> list:
    """Flatten pydantic errors into {field, message} pairs."""
    errors = []
    for error in exc.errors():
        # Drop the "body"/"query"/"path" prefix
        loc = [str(part) for part in error.get("loc", ())[1:]]
        errors.append({"field": ".".join(loc) or "request", "message": error.get("msg", "Invalid value")})
    return errors


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    errors = exc.errors if isinstance(exc, ValidationFailed) else None
    return JSONResponse(status_code=exc.status_code, content=format_error(exc.message, errors))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    error = ValidationFailed(errors=_field_errors(exc))
    return JSONResponse(status_code=error.status_code, content=format_error(error.message, error.errors))


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    error = StoreFailure()
    return JSONResponse(status_code=error.status_code, content=format_error(error.message))


# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
def root():
    """Health check endpoint."""
    return {"message": "Fintrack API is running"}


@app.get("/health", status_code=status.HTTP_200_OK)
def health():
    """Health check endpoint."""
    return {"status": "healthy"}
