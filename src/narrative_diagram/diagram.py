from __future__ import annotations

import random
from dataclasses import dataclass, field, replace

from narrative_diagram.config import DiagramConfig
from narrative_diagram.graph_builder import build_graph
from narrative_diagram.schema import Arrow, ArrowStyle, Edge, OrientedRect, Rect


def _clamp(v: float, lo: float, hi: float) -> float:
    return min(max(v, lo), hi)


# -----------------------------
# Factories
# -----------------------------


def make_rect(config: DiagramConfig, rng: random.Random) -> Rect:
    p = config.padding
    return Rect(
        x=rng.uniform(p, config.width - p),
        y=rng.uniform(p, config.height - p),
        w=rng.uniform(100, 200),
        h=rng.uniform(50, 120),
        r=rng.uniform(0, 360),
        hue=rng.uniform(190, 260),
        sat=rng.uniform(30, 90),
        bri=rng.uniform(50, 95),
        weight=rng.choice((2, 2, 2, 3, 4)),
    )


def make_arrow_style(rng: random.Random) -> ArrowStyle:
    return ArrowStyle(
        head=rng.uniform(10, 18),
        hue=rng.uniform(10, 50),
        sat=rng.uniform(40, 90),
        bri=rng.uniform(65, 95),
        weight=rng.choice((2, 2, 3, 4)),
    )


def make_arrows(config: DiagramConfig, rng: random.Random) -> tuple[Arrow, ...]:
    edges = build_graph(config.rect_count, config.arrow_count, rng)
    return tuple(Arrow(e, make_arrow_style(rng)) for e in edges)


def pick_labels(n: int, rng: random.Random) -> tuple[int, int]:
    """Two distinct rect indices for the 'first page' / 'end page' labels."""
    first = rng.randrange(n)
    end = (first + 1 + rng.randrange(n - 1)) % n
    return first, end


# -----------------------------
# Cosmetic perturbation (topology is never touched)
# -----------------------------


def perturb_rect(rect: Rect, config: DiagramConfig, rng: random.Random) -> Rect:
    p = config.padding
    return replace(
        rect,
        x=_clamp(rect.x + rng.uniform(-60, 60), p, config.width - p),
        y=_clamp(rect.y + rng.uniform(-40, 40), p, config.height - p),
        w=_clamp(rect.w + rng.uniform(-24, 24), 80, 240),
        h=_clamp(rect.h + rng.uniform(-18, 18), 40, 160),
        r=(rect.r + rng.uniform(-30, 30)) % 360,
        hue=(rect.hue + rng.uniform(-12, 12)) % 360,
        sat=_clamp(rect.sat + rng.uniform(-10, 10), 20, 100),
        bri=_clamp(rect.bri + rng.uniform(-10, 10), 35, 100),
    )


def perturb_arrow_style(style: ArrowStyle, rng: random.Random) -> ArrowStyle:
    return replace(
        style,
        hue=(style.hue + rng.uniform(-10, 10)) % 360,
        sat=_clamp(style.sat + rng.uniform(-8, 8), 25, 100),
        bri=_clamp(style.bri + rng.uniform(-8, 8), 35, 100),
        weight=int(_clamp(style.weight + rng.choice((-1, 0, 0, 1)), 1, 5)),
    )


# -----------------------------
# Diagram value object
# -----------------------------


@dataclass(frozen=True)
class Diagram:
    config: DiagramConfig
    rects: tuple[Rect, ...]
    arrows: tuple[Arrow, ...]
    label_first: int = 0
    label_end: int = 1
    flashing: bool = True
    flash_interval: int = 10
    last_flash: int = 0
    _shapes: tuple[OrientedRect, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if len(self.rects) != self.config.rect_count:
            raise ValueError(
                f"expected {self.config.rect_count} rects, got {len(self.rects)}"
            )
        n = len(self.rects)
        for name, idx in (("label_first", self.label_first), ("label_end", self.label_end)):
            if not 0 <= idx < n:
                raise ValueError(f"{name}={idx} is out of range for {n} rects")
        if self.label_first == self.label_end:
            raise ValueError("label_first and label_end must be distinct rects")
        for k, a in enumerate(self.arrows):
            if not (0 <= a.source < n and 0 <= a.target < n):
                raise ValueError(f"Arrow[{k}] {a.source}->{a.target} references unknown rect")
        object.__setattr__(
            self, "_shapes", tuple(OrientedRect.from_rect(r) for r in self.rects)
        )

    @property
    def edges(self) -> list[Edge]:
        return [a.edge for a in self.arrows]

    def shape(self, idx: int) -> OrientedRect:
        return self._shapes[idx]

    def reset(self, rng: random.Random) -> Diagram:
        """Fresh diagram with the same config; animation resumes."""
        return new_diagram(self.config, rng)

    def lock(self, rng: random.Random) -> Diagram:
        """Fresh static layout and arrows; labels move to two new rects."""
        n = self.config.rect_count
        rects = tuple(make_rect(self.config, rng) for _ in range(n))
        arrows = make_arrows(self.config, rng)
        first = rng.randrange(n)
        end = first
        while end == first:
            end = rng.randrange(n)
        return replace(
            self,
            rects=rects,
            arrows=arrows,
            label_first=first,
            label_end=end,
            flashing=False,
        )

    def cycle(self, rng: random.Random) -> Diagram:
        """Jitter every rect and arrow style; bindings stay fixed."""
        return replace(
            self,
            rects=tuple(perturb_rect(r, self.config, rng) for r in self.rects),
            arrows=tuple(
                Arrow(a.edge, perturb_arrow_style(a.style, rng)) for a in self.arrows
            ),
        )

    def tick(self, frame: int, rng: random.Random) -> Diagram:
        if not self.flashing or frame - self.last_flash <= self.flash_interval:
            return self
        cycled = self.cycle(rng)
        return replace(
            cycled,
            last_flash=frame,
            flash_interval=rng.randrange(
                self.config.flash_rate_min, self.config.flash_rate_max
            ),
        )


def new_diagram(config: DiagramConfig | None = None, rng: random.Random | None = None) -> Diagram:
    config = config or DiagramConfig()
    rng = rng or random.Random()
    rects = tuple(make_rect(config, rng) for _ in range(config.rect_count))
    arrows = make_arrows(config, rng)
    first, end = pick_labels(config.rect_count, rng)
    return Diagram(
        config=config,
        rects=rects,
        arrows=arrows,
        label_first=first,
        label_end=end,
        flashing=True,
        flash_interval=rng.randrange(config.flash_rate_min, config.flash_rate_max),
        last_flash=0,
    )
