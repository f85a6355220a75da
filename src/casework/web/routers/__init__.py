"""API routers for the REST API."""

from casework.web.routers.design import router as design_router
from casework.web.routers.rules import router as rules_router
from casework.web.routers.templates import router as templates_router

__all__ = [
    "design_router",
    "rules_router",
    "templates_router",
]
