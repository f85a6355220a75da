"""FastAPI dependency injection for the design session."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request

from casework.application.factory import ServiceFactory, get_factory
from casework.application.session import DesignSession
from casework.application.templates.manager import TemplateManager


@lru_cache(maxsize=1)
def get_service_factory() -> ServiceFactory:
    """Get cached ServiceFactory instance."""
    return get_factory()


def get_session(request: Request) -> DesignSession:
    """Dependency for the session owned by the running app."""
    return request.app.state.session


def get_template_manager(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> TemplateManager:
    """Dependency for TemplateManager."""
    return factory.get_template_manager()


# Type aliases for cleaner endpoint signatures
ServiceFactoryDep = Annotated[ServiceFactory, Depends(get_service_factory)]
SessionDep = Annotated[DesignSession, Depends(get_session)]
TemplateManagerDep = Annotated[TemplateManager, Depends(get_template_manager)]
