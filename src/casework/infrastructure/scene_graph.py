"""In-memory scene graph implementing the geometry adapter protocol.

Stands in for a real rendering library: it keeps a tree of
:class:`VisualNode` objects mirroring what a 3D scene would hold, records
colours and styles for each panel representation, and polices handle
misuse (double disposal, disposing a node that still has children,
attaching a node that already has a parent) by raising
:class:`VisualHandleError`.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Literal

from casework.domain.value_objects import (
    PanelSpec,
    Position,
    Rotation,
    SelectionColor,
    ViewMode,
)

__all__ = [
    "DEFAULT_PALETTE",
    "SceneGraphAdapter",
    "VisualHandleError",
    "VisualNode",
]

DEFAULT_PALETTE: dict[SelectionColor, str] = {
    SelectionColor.NONE: "#FFFFFF",
    SelectionColor.SINGLE: "#87CEFA",
    SelectionColor.GROUP: "#90EE90",
}


class VisualHandleError(Exception):
    """Raised when a visual handle is used in a way the scene cannot honour."""

    def __init__(self, message: str, node: VisualNode | None = None) -> None:
        self.node = node
        super().__init__(message)


@dataclass(eq=False)
class VisualNode:
    """One node of the scene graph.

    Attributes:
        node_id: Sequence number, unique per adapter.
        name: Display label.
        kind: "group" for containers, "panel" for panel geometry.
        geometry: Panel geometry for "panel" nodes.
        style: View mode the geometry was built in.
        selection_color: Highlight kind requested at build time.
        color: Resolved display colour.
    """

    node_id: int
    name: str
    kind: Literal["group", "panel"] = "group"
    geometry: PanelSpec | None = None
    style: ViewMode | None = None
    is_selected: bool = False
    selection_color: SelectionColor = SelectionColor.NONE
    color: str = DEFAULT_PALETTE[SelectionColor.NONE]
    parent: VisualNode | None = field(default=None, repr=False)
    children: list[VisualNode] = field(default_factory=list, repr=False)
    disposed: bool = False

    def iter_tree(self) -> Iterator[VisualNode]:
        """Depth-first walk of this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.iter_tree()

    def is_ancestor_of(self, other: VisualNode) -> bool:
        node = other.parent
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False


class SceneGraphAdapter:
    """Geometry adapter backed by plain Python objects.

    Example:
        adapter = SceneGraphAdapter(view_mode=ViewMode.SOLID)
        store = HierarchyStore(adapter)
        ...
        print(adapter.render_text(store.root_handle))
    """

    def __init__(
        self,
        view_mode: ViewMode | str = ViewMode.WIRE,
        palette: Mapping[SelectionColor, str] | None = None,
    ) -> None:
        self.view_mode = ViewMode(view_mode)
        self.palette: dict[SelectionColor, str] = {**DEFAULT_PALETTE, **(palette or {})}
        self._sequence = itertools.count(1)
        self._live: dict[int, VisualNode] = {}
        self.created_count = 0
        self.disposed_count = 0

    # ==================== PROTOCOL ====================

    def create_visual_group(self, name: str) -> VisualNode:
        return self._register(VisualNode(node_id=next(self._sequence), name=name))

    def attach_child(self, parent_handle: VisualNode, child_handle: VisualNode) -> None:
        self._check_live(parent_handle)
        self._check_live(child_handle)
        if child_handle.parent is not None:
            raise VisualHandleError(
                f"Node {child_handle.name!r} is already attached to {child_handle.parent.name!r}",
                child_handle,
            )
        if child_handle is parent_handle or child_handle.is_ancestor_of(parent_handle):
            raise VisualHandleError(
                f"Attaching {child_handle.name!r} under {parent_handle.name!r} would create a cycle",
                child_handle,
            )
        child_handle.parent = parent_handle
        parent_handle.children.append(child_handle)

    def detach_child(self, handle: VisualNode) -> None:
        parent = handle.parent
        if parent is None:
            return
        parent.children.remove(handle)
        handle.parent = None

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
    ) -> VisualNode:
        highlight = SelectionColor(selection_color) if is_selected else SelectionColor.NONE
        node = VisualNode(
            node_id=next(self._sequence),
            name=name,
            kind="panel",
            geometry=PanelSpec(
                name=name,
                length=length,
                width=width,
                thickness=thickness,
                position=position,
                rotation=rotation,
            ),
            style=self.view_mode,
            is_selected=is_selected,
            selection_color=highlight,
            color=self.palette[highlight],
        )
        return self._register(node)

    def dispose_representation(self, handle: VisualNode) -> None:
        if handle.disposed:
            raise VisualHandleError(f"Node {handle.name!r} disposed twice", handle)
        if handle.children:
            raise VisualHandleError(
                f"Node {handle.name!r} still has {len(handle.children)} children", handle
            )
        if handle.parent is not None:
            raise VisualHandleError(f"Node {handle.name!r} is still attached", handle)
        handle.disposed = True
        del self._live[handle.node_id]
        self.disposed_count += 1

    def set_label(self, handle: VisualNode, name: str) -> None:
        self._check_live(handle)
        handle.name = name

    # ==================== INSPECTION ====================

    @property
    def live_count(self) -> int:
        """Handles created and not yet disposed."""
        return len(self._live)

    def panel_nodes(self, root: VisualNode) -> list[VisualNode]:
        """Every panel representation below ``root``."""
        return [node for node in root.iter_tree() if node.kind == "panel"]

    def render_text(self, root: VisualNode) -> str:
        """Indented outline of the tree under ``root``."""
        lines: list[str] = []

        def walk(node: VisualNode, depth: int) -> None:
            label = node.name
            if node.kind == "panel":
                label = f"{node.name} [{node.style.value if node.style else '-'}, {node.color}]"
            lines.append(f"{'  ' * depth}{label}")
            for child in node.children:
                walk(child, depth + 1)

        walk(root, 0)
        return "\n".join(lines)

    # ==================== INTERNALS ====================

    def _register(self, node: VisualNode) -> VisualNode:
        self._live[node.node_id] = node
        self.created_count += 1
        return node

    def _check_live(self, handle: VisualNode) -> None:
        if not isinstance(handle, VisualNode):
            raise VisualHandleError(f"Not a scene node: {handle!r}")
        if handle.disposed:
            raise VisualHandleError(f"Node {handle.name!r} has been disposed", handle)
