"""FastAPI application factory."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from casework.application.factory import get_factory
from casework.application.session import DesignSession
from casework.web.exceptions import register_exception_handlers
from casework.web.routers import design_router, rules_router, templates_router


def create_app(session: DesignSession | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        session: Session the API operates on. When omitted a new one is
            created from the default service factory and bootstrapped with
            one project.

    Returns:
        Configured FastAPI application instance.
    """
    app = FastAPI(
        title="Casework Designer API",
        description="REST API for cabinet design: hierarchy, selection and templates",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    if session is None:
        session = get_factory().create_session()
        session.bootstrap()
    app.state.session = session

    # CORS middleware for browser access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(templates_router, prefix="/api/v1")
    app.include_router(design_router, prefix="/api/v1")
    app.include_router(rules_router, prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


# Application instance for ASGI servers (uvicorn)
app = create_app()
