from __future__ import annotations

from dataclasses import dataclass


Point = tuple[float, float]


@dataclass(frozen=True)
class Edge:
    source: int
    target: int


@dataclass(frozen=True)
class ArrowStyle:
    head: float
    hue: float
    sat: float
    bri: float
    weight: int


@dataclass(frozen=True)
class Arrow:
    edge: Edge
    style: ArrowStyle

    @property
    def source(self) -> int:
        return self.edge.source

    @property
    def target(self) -> int:
        return self.edge.target


@dataclass(frozen=True)
class Rect:
    """One diagram node. Identity is its index in `Diagram.rects`."""

    x: float  # center
    y: float
    w: float
    h: float
    r: float  # rotation, degrees
    hue: float = 220.0
    sat: float = 60.0
    bri: float = 80.0
    weight: int = 2

    @property
    def center(self) -> Point:
        return (self.x, self.y)


@dataclass(frozen=True)
class OrientedRect:
    x: float
    y: float
    hw: float
    hh: float
    theta: float = 0.0

    def __post_init__(self) -> None:
        if not (self.hw > 0 and self.hh > 0):
            raise ValueError(f"half extents must be positive, got hw={self.hw}, hh={self.hh}")

    @classmethod
    def from_size(cls, x: float, y: float, w: float, h: float, r: float = 0.0) -> OrientedRect:
        return cls(x, y, w / 2, h / 2, r)

    @classmethod
    def from_rect(cls, rect: Rect) -> OrientedRect:
        return cls.from_size(rect.x, rect.y, rect.w, rect.h, rect.r)

    @property
    def center(self) -> Point:
        return (self.x, self.y)
