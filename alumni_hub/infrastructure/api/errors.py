from __future__ import annotations

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.responses import JSONResponse
from loguru import logger

from alumni_hub.domain.errors import InvalidIdentity, ProfileNotFound, StoreUnavailable

RETRY_LATER = "Profile service is temporarily unavailable, please try again later"


def add_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidIdentity)
    async def invalid_identity(request: Request, exc: InvalidIdentity) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})

    @app.exception_handler(ProfileNotFound)
    async def profile_not_found(request: Request, exc: ProfileNotFound) -> JSONResponse:
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": str(exc)})

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable(request: Request, exc: StoreUnavailable) -> JSONResponse:
        logger.error("Profile store failure on {} {}: {}", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": RETRY_LATER}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # the profile API speaks {error}; other routes keep FastAPI's 422 detail
        if not request.url.path.startswith("/api/"):
            return await request_validation_exception_handler(request, exc)
        first = exc.errors()[0] if exc.errors() else {}
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": f"{loc}: {message}" if loc else message},
        )
