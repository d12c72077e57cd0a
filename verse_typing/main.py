"""FastAPI application factory."""
from __future__ import annotations

from typing import List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from verse_typing.api.v1 import api_router
from verse_typing.config import settings
from verse_typing.utils.exceptions import ValidationError, handle_validation_error


tags_metadata: List[dict[str, str]] = [
    {"name": "typing", "description": "Open typing sessions and submit typed verses."},
    {"name": "daily-activity", "description": "Per-day log of typed verses and averages."},
    {"name": "analytics", "description": "Bucketed speed and accuracy series for charts."},
]


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance."""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Typing speed and accuracy analytics for Bible passage practice.",
        version="0.1.0",
        openapi_tags=tags_metadata,
        docs_url=f"{settings.API_V1_STR}/docs",
        redoc_url=f"{settings.API_V1_STR}/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": exc.errors(), "message": "Validation failed"},
        )

    @app.exception_handler(ValidationError)
    async def domain_validation_exception_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        http_exc = handle_validation_error(exc)
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
