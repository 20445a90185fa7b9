"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ... import __version__
from ...config import Config
from ...errors import KineticError, ProviderError, ValidationError
from .dependencies import get_config
from .models.responses import ErrorBody, ErrorResponse
from .routers import projects_router, render_router, stages_router

logger = logging.getLogger(__name__)


def _error_response(status_code: int, body: ErrorBody) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=body).model_dump(exclude_none=True),
    )


async def kinetic_error_handler(request: Request, exc: KineticError) -> JSONResponse:
    """Map application errors to their HTTP status and an error body."""
    body = ErrorBody(code=exc.code, message=exc.message)
    if isinstance(exc, ProviderError):
        body.stage = exc.stage
        body.provider = exc.provider
        logger.error("%s %s failed at stage %s: %s", request.method, request.url.path, exc.stage, exc.message)
    elif isinstance(exc, ValidationError):
        body.stage = exc.stage
        body.fields = exc.fields
    return _error_response(exc.status_code, body)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as validation errors (400)."""
    fields: dict[str, list[str]] = {}
    for error in exc.errors():
        name = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        fields.setdefault(name, []).append(error.get("msg", "invalid"))
    body = ErrorBody(code=ValidationError.code, message="Invalid request body", fields=fields)
    return _error_response(ValidationError.status_code, body)


def create_app(config: Config | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Optional configuration. Loaded from config.yaml if not provided.

    Returns:
        The FastAPI application.
    """
    if config is None:
        config = get_config()

    app = FastAPI(
        title="Kinetic Typography API",
        description="API for generating, editing and rendering kinetic typography timelines",
        version=__version__,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.web.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(KineticError, kinetic_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Include routers
    app.include_router(stages_router, prefix="/api/v1")
    app.include_router(projects_router, prefix="/api/v1")
    app.include_router(render_router, prefix="/api/v1")

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "providers": config.providers.mode}

    return app
