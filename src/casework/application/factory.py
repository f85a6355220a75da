"""Service factory for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from casework.application.config.schema import DesignerSettings

if TYPE_CHECKING:
    from casework.application.session import DesignSession
    from casework.application.templates.manager import TemplateManager
    from casework.contracts.protocols import (
        GeometryAdapterProtocol,
        TemplateSourceProtocol,
    )
    from casework.infrastructure.stl_exporter import StlExporter


@dataclass
class ServiceFactory:
    """Factory for creating service instances from settings.

    Each call to :meth:`create_session` wires a fresh adapter, store and
    selection engine; nothing is shared between sessions. Stateless
    services (template manager, template source, STL exporter) are created
    lazily and cached.

    Example:
        ```python
        factory = ServiceFactory(settings=load_settings(Path("casework.json")))
        session = factory.create_session()
        session.bootstrap()
        ```
    """

    settings: DesignerSettings = field(default_factory=DesignerSettings)

    _template_manager: TemplateManager | None = field(default=None, init=False, repr=False)
    _template_source: TemplateSourceProtocol | None = field(
        default=None, init=False, repr=False
    )
    _stl_exporter: StlExporter | None = field(default=None, init=False, repr=False)

    def create_adapter(self) -> GeometryAdapterProtocol:
        """Create a scene graph adapter using the configured view mode and palette."""
        from casework.infrastructure.scene_graph import SceneGraphAdapter

        return SceneGraphAdapter(
            view_mode=self.settings.view_mode,
            palette=self.settings.palette.as_mapping(),
        )

    def create_session(self, adapter: GeometryAdapterProtocol | None = None) -> DesignSession:
        """Create a session with its own store over ``adapter`` (or a new one)."""
        from casework.application.session import DesignSession
        from casework.domain.hierarchy import HierarchyStore

        store = HierarchyStore(
            adapter or self.create_adapter(),
            first_floor_name=self.settings.default_floor_name,
        )
        return DesignSession(store, template_source=self.get_template_source())

    def get_template_manager(self) -> TemplateManager:
        """Get or create the bundled template manager."""
        if self._template_manager is None:
            from casework.application.templates.manager import TemplateManager

            self._template_manager = TemplateManager()
        return self._template_manager

    def get_template_source(self) -> TemplateSourceProtocol:
        """Get or create the template source the settings point at.

        A ``template_url`` wins over a ``template_dir``; with neither set
        the bundled templates are used.
        """
        if self._template_source is None:
            from casework.infrastructure.template_sources import (
                BundledTemplateSource,
                DirectoryTemplateSource,
                HttpTemplateSource,
            )

            if self.settings.template_url:
                self._template_source = HttpTemplateSource(
                    self.settings.template_url, timeout=self.settings.http_timeout
                )
            elif self.settings.template_dir:
                self._template_source = DirectoryTemplateSource(Path(self.settings.template_dir))
            else:
                self._template_source = BundledTemplateSource(self.get_template_manager())
        return self._template_source

    def get_stl_exporter(self) -> StlExporter:
        """Get or create the STL exporter."""
        if self._stl_exporter is None:
            from casework.infrastructure.stl_exporter import StlExporter

            self._stl_exporter = StlExporter()
        return self._stl_exporter


# Default factory instance
_default_factory: ServiceFactory | None = None


def get_factory() -> ServiceFactory:
    """Get the default service factory."""
    global _default_factory
    if _default_factory is None:
        _default_factory = ServiceFactory()
    return _default_factory


def set_factory(factory: ServiceFactory | None) -> None:
    """Set a custom factory (for testing)."""
    global _default_factory
    _default_factory = factory


def reset_factory() -> None:
    """Reset the factory to default (for testing cleanup)."""
    global _default_factory
    _default_factory = None
