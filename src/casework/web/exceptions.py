"""Custom exceptions and error handlers for the REST API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from casework.application.config import ConfigError
from casework.application.templates import (
    TemplateError,
    TemplateNotFoundError,
    TemplateSourceError,
)


class EntityNotFoundError(Exception):
    """Raised when a request names an entity the store does not hold."""

    def __init__(self, kind: str, entity_id: str) -> None:
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind.capitalize()} not found: {entity_id}")


class OperationRejectedError(Exception):
    """Raised when the store declines a well-formed request."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(EntityNotFoundError)
    async def entity_not_found_handler(
        request: Request, exc: EntityNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={
                "error": str(exc),
                "error_type": "not_found",
                "details": {"kind": exc.kind, "id": exc.entity_id},
            },
        )

    @app.exception_handler(OperationRejectedError)
    async def rejected_handler(request: Request, exc: OperationRejectedError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"error": exc.message, "error_type": "rejected", "details": None},
        )

    @app.exception_handler(TemplateNotFoundError)
    async def template_not_found_handler(
        request: Request, exc: TemplateNotFoundError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={
                "error": f"Template not found: {exc.name}",
                "error_type": "not_found",
                "details": None,
            },
        )

    @app.exception_handler(TemplateError)
    async def template_error_handler(request: Request, exc: TemplateError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": "template",
                "details": exc.details,
            },
        )

    @app.exception_handler(TemplateSourceError)
    async def template_source_handler(
        request: Request, exc: TemplateSourceError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=502,
            content={
                "error": exc.message,
                "error_type": "template_source",
                "details": {"source": exc.source},
            },
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details,
            },
        )
