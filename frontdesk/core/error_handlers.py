"""
Exception handlers that translate application errors into JSON responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from frontdesk.core.exceptions import BaseAppException
from frontdesk.core.logging import get_logger

logger = get_logger(__name__)


async def app_exception_handler(request: Request, exc: BaseAppException) -> JSONResponse:
    """Render application exceptions with their own status code and body"""
    if exc.status_code >= 500:
        logger.error(
            f"{request.method} {request.url.path} failed: {exc}",
            extra={"error_code": exc.error_code.value, "details": exc.details},
        )
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def database_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Surface unexpected database errors as 500 with the underlying message"""
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "message": "Database operation failed",
                "code": "DATABASE_ERROR",
                "details": {"reason": str(exc.__cause__ or exc)},
                "type": exc.__class__.__name__,
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, app_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
