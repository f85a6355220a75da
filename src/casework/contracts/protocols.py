"""Protocols for the collaborators the core talks to.

The hierarchy store only ever *writes* to the geometry adapter; the
adapter's handles are opaque to it. Template sources are the retrieval
side of template loading and are awaited by the design session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from casework.domain.value_objects import (
        Position,
        Rotation,
        SelectionColor,
        ViewMode,
    )


@runtime_checkable
class GeometryAdapterProtocol(Protocol):
    """Builds and arranges the visual projection of the hierarchy.

    Handles returned by this protocol are opaque. Every handle created
    through it must be passed to :meth:`dispose_representation` exactly once
    before it is dropped.

    Attributes:
        view_mode: Global style (wire or solid) used by
            :meth:`build_panel_representation`.
    """

    view_mode: ViewMode

    def create_visual_group(self, name: str) -> Any:
        """Create an empty, unattached group node labelled ``name``."""
        ...

    def attach_child(self, parent_handle: Any, child_handle: Any) -> None:
        """Attach ``child_handle`` under ``parent_handle``.

        The child must not currently be attached anywhere.
        """
        ...

    def detach_child(self, handle: Any) -> None:
        """Detach ``handle`` from its parent. No-op when unattached."""
        ...

    def build_panel_representation(
        self,
        length: float,
        width: float,
        thickness: float,
        position: Position,
        rotation: Rotation,
        name: str,
        is_selected: bool,
        selection_color: SelectionColor,
    ) -> Any:
        """Build the geometry node for one panel in the current view mode."""
        ...

    def dispose_representation(self, handle: Any) -> None:
        """Release the resources behind ``handle``."""
        ...

    def set_label(self, handle: Any, name: str) -> None:
        """Update the display label of ``handle``."""
        ...


@runtime_checkable
class TemplateSourceProtocol(Protocol):
    """Retrieves named template documents from storage."""

    async def list_templates(self) -> list[str]:
        """Names of the available template documents."""
        ...

    async def fetch_template(self, name: str) -> dict[str, Any]:
        """Fetch and JSON-decode one template document.

        Raises:
            TemplateNotFoundError: If the name is unknown to the source.
            TemplateSourceError: If the source cannot be read.
        """
        ...
