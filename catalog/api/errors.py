"""
API error handling for consistent error responses across the application.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException

from catalog.api.responses import error_content
from catalog.core.exceptions import (
    CatalogError,
    Conflict,
    NotFound,
    StoreFailure,
    ValidationFailed,
)
from catalog.schemas.validation import field_errors

DOMAIN_STATUS_CODES = {
    ValidationFailed: status.HTTP_400_BAD_REQUEST,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
    StoreFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: CatalogError) -> int:
    for error_type, status_code in DOMAIN_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers for the FastAPI application.
    """

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Report request validation problems per field.
        """
        logger.warning(f"Validation error: {exc.errors()}")
        errors = [{"field": field, "message": message} for field, message in field_errors(exc.errors())]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_content("Validation failed", errors=errors),
        )

    @app.exception_handler(CatalogError)
    async def catalog_exception_handler(request: Request, exc: CatalogError) -> JSONResponse:
        """
        Translate domain errors raised by the services.
        """
        status_code = status_code_for(exc)
        if isinstance(exc, ValidationFailed):
            content = error_content(exc.message, errors=exc.as_dicts())
        elif isinstance(exc, StoreFailure):
            logger.error(f"Store failure: {exc.message} ({exc.detail})")
            content = error_content(exc.message)
        else:
            content = error_content(exc.message)
        return JSONResponse(status_code=status_code, content=content)

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        """
        Wrap framework HTTP errors in the standard envelope.
        """
        return JSONResponse(
            status_code=exc.status_code,
            content=error_content(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        """
        Handle database integrity errors.
        """
        logger.error(f"Database integrity error: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=error_content("Database integrity error", error=str(exc.orig)),
        )

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        """
        Handle general SQLAlchemy errors.
        """
        logger.error(f"Database error: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_content("Database error"),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """
        Handle all other uncaught exceptions.
        """
        logger.exception(f"Unhandled exception: {str(exc)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_content("Internal server error", error=str(exc)),
        )
