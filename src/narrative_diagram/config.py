from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_pictures_dir

from narrative_diagram.graph_builder import min_edge_count, validate_node_count

_ENV_OUT_DIR = "NARRATIVE_DIAGRAM_OUT_DIR"


@dataclass(frozen=True)
class DiagramConfig:
    width: int = 1100
    height: int = 640
    rect_count: int = 8
    # 3 * rect_count arrows are needed for indegree >= 3 everywhere;
    # smaller values are bumped by effective_arrow_count.
    arrow_count: int = 24
    flash_rate_min: int = 6
    flash_rate_max: int = 16
    bg_alpha: int = 26  # 0..255 fade strength per frame
    padding: int = 36

    def __post_init__(self) -> None:
        validate_node_count(self.rect_count)
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"canvas size must be positive, got {self.width}x{self.height}")
        if not (0 < self.flash_rate_min < self.flash_rate_max):
            raise ValueError(
                "flash rates must satisfy 0 < flash_rate_min < flash_rate_max, "
                f"got {self.flash_rate_min}, {self.flash_rate_max}"
            )
        if not (0 <= self.bg_alpha <= 255):
            raise ValueError(f"bg_alpha must be in [0, 255], got {self.bg_alpha}")
        if self.padding < 0 or 2 * self.padding >= min(self.width, self.height):
            raise ValueError(f"padding {self.padding} does not fit a {self.width}x{self.height} canvas")

    @property
    def effective_arrow_count(self) -> int:
        return min_edge_count(self.rect_count, self.arrow_count)


def get_output_root() -> Path:
    """
    Default directory for saved diagrams.

    Override with env var:
      NARRATIVE_DIAGRAM_OUT_DIR=/path/to/dir

    Default:
      platformdirs.user_pictures_dir() / "narrative-diagram"
    """
    override = os.environ.get(_ENV_OUT_DIR)
    if override:
        return Path(override).expanduser().resolve()

    return Path(user_pictures_dir()) / "narrative-diagram"
