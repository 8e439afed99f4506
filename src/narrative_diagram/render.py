from __future__ import annotations

import math
import random
from functools import lru_cache
from pathlib import Path

import cv2
import numpy as np
from matplotlib.colors import hsv_to_rgb
from PIL import Image

from narrative_diagram.diagram import Diagram
from narrative_diagram.errors import RenderError
from narrative_diagram.geometry import arrow_segment, corners
from narrative_diagram.schema import Arrow, OrientedRect, Point, Rect

BACKGROUND_BGR = (20, 14, 12)
FIRST_LABEL = "first page"
END_LABEL = "end page"

_FONT = cv2.FONT_HERSHEY_SIMPLEX


def hsb_to_bgr(hue: float, sat: float, bri: float) -> tuple[int, int, int]:
    """HSB in (0-360, 0-100, 0-100) -> OpenCV BGR ints."""
    rgb = hsv_to_rgb((hue % 360 / 360.0, sat / 100.0, bri / 100.0))
    r, g, b = (int(round(c * 255)) for c in rgb)
    return (b, g, r)


@lru_cache(maxsize=8)
def _vignette(width: int, height: int) -> np.ndarray:
    # Radial darkening: transparent inside 0.1 * width, 25% black at 0.75 * max(w, h).
    cx, cy = width * 0.5, height * 0.45
    r0, r1 = width * 0.1, max(width, height) * 0.75
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float32)
    d = np.hypot(xs - cx, ys - cy)
    t = np.clip((d - r0) / (r1 - r0), 0.0, 1.0)
    return (1.0 - 0.25 * t)[..., None]


def _pt(p: Point) -> tuple[int, int]:
    return (int(round(p[0])), int(round(p[1])))


def _background(config, base: np.ndarray | None) -> np.ndarray:
    h, w = config.height, config.width
    bg = np.empty((h, w, 3), dtype=np.float32)
    bg[:] = BACKGROUND_BGR
    if base is None:
        out = bg
    else:
        if base.shape != (h, w, 3):
            raise RenderError(f"base frame shape {base.shape} does not match {(h, w, 3)}")
        a = config.bg_alpha / 255.0
        out = base.astype(np.float32) * (1.0 - a) + bg * a
    out *= _vignette(w, h)
    return out.astype(np.uint8)


def arrow_head_points(start: Point, end: Point, head: float) -> list[Point]:
    """Triangle with its tip on `end`, `head` long and `head` wide at the base."""
    (x1, y1), (x2, y2) = start, end
    ang = math.atan2(y2 - y1, x2 - x1)
    c, s = math.cos(ang), math.sin(ang)
    h, hw = head, head * 0.8
    return [
        (x2, y2),
        (x2 - h * c + hw / 1.6 * s, y2 - h * s - hw / 1.6 * c),
        (x2 - h * c - hw / 1.6 * s, y2 - h * s + hw / 1.6 * c),
    ]


def draw_arrow(img: np.ndarray, arrow: Arrow, a: OrientedRect, b: OrientedRect) -> None:
    start, end = arrow_segment(a, b)
    st = arrow.style
    color = hsb_to_bgr(st.hue, st.sat, st.bri)
    cv2.line(img, _pt(start), _pt(end), color, st.weight, cv2.LINE_AA)

    # Filled head with its tip on b's edge
    head = arrow_head_points(start, end, st.head)
    cv2.fillConvexPoly(img, np.array([_pt(p) for p in head], dtype=np.int32), color, cv2.LINE_AA)


def _put_centered(img: np.ndarray, text: str, center: Point, size_px: float, color) -> None:
    scale = size_px / 30.0
    thickness = max(1, int(round(scale * 1.5)))
    (tw, th), _ = cv2.getTextSize(text, _FONT, scale, thickness)
    org = (int(round(center[0] - tw / 2)), int(round(center[1] + th / 2)))
    cv2.putText(img, text, org, _FONT, scale, color, thickness, cv2.LINE_AA)


def draw_rect(
    img: np.ndarray,
    rect: Rect,
    shape: OrientedRect,
    *,
    show_first: bool = False,
    show_end: bool = False,
) -> None:
    pts = np.array([_pt(p) for p in corners(shape)], dtype=np.int32)
    color = hsb_to_bgr(rect.hue, rect.sat, rect.bri)
    cv2.polylines(img, [pts], True, color, rect.weight, cv2.LINE_AA)

    ts = max(12.0, min(28.0, 0.22 * min(rect.w, rect.h)))
    if show_first:
        _put_centered(img, FIRST_LABEL, (rect.x, rect.y - ts * 0.1), ts, (255, 255, 255))
    if show_end:
        _put_centered(img, END_LABEL, (rect.x, rect.y + ts * 0.9), ts, hsb_to_bgr(45, 90, 100))


def render_frame(diagram: Diagram, base: np.ndarray | None = None) -> np.ndarray:
    """
    Draw one frame (BGR uint8, height x width x 3).

    With `base`, the previous frame is faded toward the background by
    config.bg_alpha, which leaves motion trails across an animation.
    """
    img = _background(diagram.config, base)

    # arrows under
    for arrow in diagram.arrows:
        draw_arrow(img, arrow, diagram.shape(arrow.source), diagram.shape(arrow.target))

    # rects over, with labels
    for idx, rect in enumerate(diagram.rects):
        draw_rect(
            img,
            rect,
            diagram.shape(idx),
            show_first=idx == diagram.label_first,
            show_end=idx == diagram.label_end,
        )

    return img


def render_animation(
    diagram: Diagram,
    frames: int,
    rng: random.Random | None = None,
) -> tuple[list[np.ndarray], Diagram]:
    """Render `frames` frames, ticking the diagram each frame. Returns (frames, final diagram)."""
    if frames <= 0:
        raise ValueError("frames must be > 0")
    rng = rng or random.Random()

    out: list[np.ndarray] = []
    img: np.ndarray | None = None
    for frame in range(1, frames + 1):
        diagram = diagram.tick(frame, rng)
        img = render_frame(diagram, img)
        out.append(img)
    return out, diagram


def save_png(img: np.ndarray, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    ok = cv2.imwrite(str(path), img)
    if not ok:
        raise RenderError(f"Failed to write image: {path}")
    return path


def save_gif(frames: list[np.ndarray], path: str | Path, *, fps: int = 30) -> Path:
    if not frames:
        raise RenderError("No frames to write")
    if fps <= 0:
        raise ValueError("fps must be > 0")
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    images = [Image.fromarray(cv2.cvtColor(f, cv2.COLOR_BGR2RGB)) for f in frames]
    try:
        images[0].save(
            path,
            format="GIF",
            save_all=True,
            append_images=images[1:],
            duration=max(1, int(1000 / fps)),
            loop=0,
        )
    except OSError as e:
        raise RenderError(f"Failed to write animation: {path}") from e
    return path
