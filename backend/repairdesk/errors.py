"""Application-level exception handlers."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .core.exceptions import DomainException, RepositoryException, is_db_pool_exhaustion

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
        # Routes normally convert these themselves; this catches the rest
        http_exc = exc.to_http_exception()
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    @app.exception_handler(RepositoryException)
    async def repository_exception_handler(request: Request, exc: RepositoryException) -> JSONResponse:
        logger.error(
            f"Data access failure on {request.method} {request.url.path}: {str(exc)}",
            extra={"pool_exhausted": is_db_pool_exhaustion(exc)},
        )
        return JSONResponse(
            status_code=503,
            content={
                "detail": {
                    "message": "Service temporarily unavailable",
                    "code": "BACKEND_UNAVAILABLE",
                    "details": {},
                }
            },
        )
