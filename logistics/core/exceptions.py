"""Application-level exceptions and FastAPI exception handlers."""


import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, IntegrityError

logger = logging.getLogger(__name__)

class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = 500, code: str = "INTERNAL_ERROR"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)

class NotFoundError(AppException):
    def __init__(self, entity: str, entity_id: str | None = None):
        msg = f"{entity} not found" if not entity_id else f"{entity} '{entity_id}' not found"
        super().__init__(msg, status_code=404, code="NOT_FOUND")

class CrossTenantReferenceError(NotFoundError):
    """A write tried to link to a row the acting tenant does not own.

    Rendered exactly like :class:`NotFoundError` so that a foreign row cannot
    be told apart from a missing one. Only the type differs, for callers and
    server-side logs.
    """

    def __init__(self, entity: str, entity_id: str):
        super().__init__(entity, entity_id)
        self.entity = entity
        self.entity_id = entity_id

class ForbiddenError(AppException):
    def __init__(self, message: str = "Access denied"):
        super().__init__(message, status_code=403, code="FORBIDDEN")

class UnauthenticatedError(AppException):
    """Identity could not be established. *reason* is for server-side logs only."""

    def __init__(self, reason: str = "", message: str = "Authentication required"):
        super().__init__(message, status_code=401, code="UNAUTHORIZED")
        self.reason = reason

class AccountInactiveError(AppException):
    def __init__(self, reason: str = ""):
        super().__init__("Account is not active", status_code=403, code="ACCOUNT_INACTIVE")
        self.reason = reason

class ConflictError(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=409, code="CONFLICT")

class ValidationError(AppException):
    def __init__(self, message: str):
        super().__init__(message, status_code=422, code="VALIDATION_ERROR")

class TransientStoreError(AppException):
    """Connection / timeout-class database failure. Never retried internally."""

    def __init__(self, message: str = "The data store is temporarily unavailable"):
        super().__init__(message, status_code=503, code="TRANSIENT_STORE_ERROR")

# ---------------------------------------------------------------------------
# Schema migrations (startup-fatal, never rendered over HTTP)
# ---------------------------------------------------------------------------

class MigrationError(Exception):
    """A migration could not be loaded or applied."""

class MigrationDirtyError(MigrationError):
    """A previous migration failed mid-script; manual resolution is required."""

    def __init__(self, version: int):
        super().__init__(
            f"Database schema is dirty at version {version}; "
            "fix the schema by hand, then run `force` to clear the flag"
        )
        self.version = version

# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def _error_body(code: str, message: str) -> dict:
    return {"error": {"code": code, "message": message}}

def register_exception_handlers(app: FastAPI) -> None:
    """Attach all custom exception handlers to the FastAPI app."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if isinstance(exc, (UnauthenticatedError, AccountInactiveError)):
            logger.warning(
                "Identity rejected: %s %s -> %s (%s)",
                request.method, request.url.path, exc.code, exc.reason or "no detail",
            )
        elif isinstance(exc, CrossTenantReferenceError):
            logger.warning(
                "Rejected reference to foreign or missing %s '%s' on %s %s",
                exc.entity, exc.entity_id, request.method, request.url.path,
            )
        elif exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.code, exc.message),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
        logger.warning("Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content=_error_body("CONFLICT", "The write was rejected by a data constraint"),
        )

    @app.exception_handler(DBAPIError)
    async def store_error_handler(request: Request, exc: DBAPIError) -> JSONResponse:
        logger.error("Data store failure on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=_error_body("TRANSIENT_STORE_ERROR", TransientStoreError().message),
        )

    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=_error_body("NOT_FOUND", "Resource not found"),
        )

    @app.exception_handler(500)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content=_error_body("INTERNAL_ERROR", "An unexpected error occurred"),
        )
