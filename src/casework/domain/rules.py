"""Construction rules: expand cabinet parameters into panel geometry.

Coordinate system (cabinet-local):
- Origin: one bottom-rear corner of the carcass
- X: Width (left to right)
- Y: Height (bottom to top)
- Z: Depth (rear to front)

Panel geometry is given as a centre position plus an Euler rotation in
degrees. A panel's own axes are length (X), width (Y) and thickness (Z)
before rotation.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .value_objects import (
    BackType,
    ConstructionOptions,
    PanelSpec,
    Position,
    Rotation,
    TopStyle,
)

__all__ = ["PANEL_ORDER", "derive_panels"]

PANEL_ORDER: tuple[str, ...] = ("Left Side", "Right Side", "Bottom", "Top", "Back")

# Sides stand on edge with their thickness along X.
_SIDE_ROTATION = Rotation(rx=90, ry=90, rz=0)
# Bottom and top lie flat.
_FLAT_ROTATION = Rotation(rx=90, ry=0, rz=0)
_BACK_ROTATION = Rotation(rx=0, ry=0, rz=0)


def derive_panels(
    width: float,
    height: float,
    depth: float,
    thickness: float,
    options: ConstructionOptions | Mapping[str, Any] | None = None,
) -> list[PanelSpec]:
    """Derive the five carcass panels of a cabinet.

    Pure function: no ids, no handles, no side effects.

    Args:
        width: Overall cabinet width (W).
        height: Overall cabinet height (H).
        depth: Overall cabinet depth (D).
        thickness: Board thickness (t).
        options: Construction options. Unknown keys and values fall back
            to the defaults (between-sides top, screwed back).

    Returns:
        Panel specs in the order Left Side, Right Side, Bottom, Top, Back.
    """
    w = float(width)
    h = float(height)
    d = float(depth)
    t = float(thickness)
    opts = ConstructionOptions.from_mapping(options)

    # Carcass panels sit one thickness forward of the rear plane.
    z_mid = d / 2 + t

    panels = [
        PanelSpec(
            name="Left Side",
            length=h,
            width=d,
            thickness=t,
            position=Position(t / 2, h / 2, z_mid),
            rotation=_SIDE_ROTATION,
        ),
        PanelSpec(
            name="Right Side",
            length=h,
            width=d,
            thickness=t,
            position=Position(w - t / 2, h / 2, z_mid),
            rotation=_SIDE_ROTATION,
        ),
        PanelSpec(
            name="Bottom",
            length=w - 2 * t,
            width=d,
            thickness=t,
            position=Position(w / 2, t / 2, z_mid),
            rotation=_FLAT_ROTATION,
        ),
        _top_panel(w, h, d, t, opts.top_style),
        _back_panel(w, h, t, opts.back_type),
    ]
    return panels


def _top_panel(w: float, h: float, d: float, t: float, style: TopStyle) -> PanelSpec:
    length = w if style is TopStyle.FLUSH_WITH_SIDES else w - 2 * t
    return PanelSpec(
        name="Top",
        length=length,
        width=d,
        thickness=t,
        position=Position(w / 2, h - t / 2, d / 2 + t),
        rotation=_FLAT_ROTATION,
    )


def _back_panel(w: float, h: float, t: float, back_type: BackType) -> PanelSpec:
    if back_type is BackType.GROOVE:
        # Inset by one thickness on every edge and recessed into the groove.
        return PanelSpec(
            name="Back",
            length=w - 2 * t,
            width=h - 2 * t,
            thickness=t,
            position=Position(w / 2, h / 2, t),
            rotation=_BACK_ROTATION,
        )
    return PanelSpec(
        name="Back",
        length=w,
        width=h,
        thickness=t,
        position=Position(w / 2, h / 2, t / 2),
        rotation=_BACK_ROTATION,
    )
