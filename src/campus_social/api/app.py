"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from campus_social.api.profile import router as profile_router
from campus_social.app_logging import configure_logging
from campus_social.containers import AppContainer
from campus_social.domain.errors import SocialError

_STATUS_BY_KIND = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "invalid_operation": status.HTTP_400_BAD_REQUEST,
    "already_following": status.HTTP_400_BAD_REQUEST,
    "not_following": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "unavailable": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            app.state.container.ensure_indexes()
        except Exception:
            logger.exception("Failed to ensure MongoDB indexes")
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(profile_router)

    @app.exception_handler(SocialError)
    async def social_error_handler(request: Request, exc: SocialError) -> JSONResponse:
        """Render expected errors with their stable kind tag."""
        status_code = _STATUS_BY_KIND.get(
            exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR
        )
        return _error_response(status_code, exc.kind, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Render malformed requests as validation errors."""
        return _error_response(
            status.HTTP_400_BAD_REQUEST, "validation_error", "Malformed request"
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Log unexpected failures without leaking details to the client."""
        logger.exception(
            "Unhandled error", extra={"path": request.url.path}, exc_info=exc
        )
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Server error"
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app


def _error_response(status_code: int, kind: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"kind": kind, "message": message}},
    )
