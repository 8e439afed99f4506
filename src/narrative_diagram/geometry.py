from __future__ import annotations

import math

from narrative_diagram.schema import OrientedRect, Point

_MIN_MAG = 1e-6


def _rotate(x: float, y: float, deg: float) -> Point:
    a = math.radians(deg)
    c, s = math.cos(a), math.sin(a)
    return (x * c - y * s, x * s + y * c)


def to_local(rect: OrientedRect, point: Point) -> Point:
    """World point -> rect frame (centered, unrotated)."""
    return _rotate(point[0] - rect.x, point[1] - rect.y, -rect.theta)


def to_world(rect: OrientedRect, local: Point) -> Point:
    x, y = _rotate(local[0], local[1], rect.theta)
    return (x + rect.x, y + rect.y)


def corners(rect: OrientedRect) -> list[Point]:
    """World-space corners, clockwise in screen coordinates starting top-left."""
    hw, hh = rect.hw, rect.hh
    return [to_world(rect, p) for p in ((-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh))]


def anchor_point(rect: OrientedRect, target: Point) -> Point:
    """
    Point where the ray from rect's center toward `target` exits the rect.

    Works in the rect's own frame, so the oriented case reduces to a ray vs
    axis-aligned box exit. A target exactly on the center falls back to direction (1, 0).
    """
    lx, ly = to_local(rect, target)

    if lx == 0 and ly == 0:
        ux, uy = 1.0, 0.0
    else:
        mag = max(_MIN_MAG, math.hypot(lx, ly))
        ux, uy = lx / mag, ly / mag

    tx = rect.hw / abs(ux) if ux != 0 else math.inf
    ty = rect.hh / abs(uy) if uy != 0 else math.inf
    t = min(tx, ty)

    return to_world(rect, (ux * t, uy * t))


def arrow_segment(a: OrientedRect, b: OrientedRect) -> tuple[Point, Point]:
    """Anchor points for an arrow a -> b, each aimed at the other rect's center."""
    return anchor_point(a, b.center), anchor_point(b, a.center)
