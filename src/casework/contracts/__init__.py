"""Contracts between the casework core and its collaborators."""

from casework.contracts.protocols import (
    GeometryAdapterProtocol,
    TemplateSourceProtocol,
)

__all__ = [
    "GeometryAdapterProtocol",
    "TemplateSourceProtocol",
]
