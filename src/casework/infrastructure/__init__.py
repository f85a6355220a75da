"""Infrastructure layer - scene graph adapter, STL export and template sources."""

from casework.infrastructure.scene_graph import (
    DEFAULT_PALETTE,
    SceneGraphAdapter,
    VisualHandleError,
    VisualNode,
)
from casework.infrastructure.stl_exporter import StlExporter, StlMeshBuilder
from casework.infrastructure.template_sources import (
    BundledTemplateSource,
    DirectoryTemplateSource,
    HttpTemplateSource,
    sanitize_template_name,
)

__all__ = [
    "BundledTemplateSource",
    "DEFAULT_PALETTE",
    "DirectoryTemplateSource",
    "HttpTemplateSource",
    "SceneGraphAdapter",
    "StlExporter",
    "StlMeshBuilder",
    "VisualHandleError",
    "VisualNode",
    "sanitize_template_name",
]
