# phonedeals/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from phonedeals.domain.errors import DomainError
from phonedeals.utils.logging import get_logger

logger = get_logger(__name__)


def register_error_handlers(app: FastAPI):
    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.message},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error"},
        )
