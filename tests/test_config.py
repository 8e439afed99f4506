from __future__ import annotations

from pathlib import Path

import pytest

from narrative_diagram.config import DiagramConfig, get_output_root
from narrative_diagram.errors import InvalidNodeCountError


def test_defaults_match_sketch_constants():
    cfg = DiagramConfig()
    assert (cfg.width, cfg.height) == (1100, 640)
    assert cfg.rect_count == 8
    assert cfg.arrow_count == 24
    assert cfg.effective_arrow_count == 24


def test_arrow_count_is_bumped_for_more_rects():
    cfg = DiagramConfig(rect_count=12, arrow_count=24)
    assert cfg.effective_arrow_count == 36


def test_rect_count_below_minimum_rejected():
    with pytest.raises(InvalidNodeCountError):
        DiagramConfig(rect_count=2)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"width": 0},
        {"height": -5},
        {"flash_rate_min": 10, "flash_rate_max": 10},
        {"bg_alpha": 300},
        {"padding": 400},
    ],
)
def test_invalid_config_rejected(kwargs):
    with pytest.raises(ValueError):
        DiagramConfig(**kwargs)


def test_output_root_env_override(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("NARRATIVE_DIAGRAM_OUT_DIR", str(tmp_path / "pics"))
    assert get_output_root() == (tmp_path / "pics").resolve()


def test_output_root_default_uses_pictures_dir(monkeypatch):
    monkeypatch.delenv("NARRATIVE_DIAGRAM_OUT_DIR", raising=False)
    assert get_output_root().name == "narrative-diagram"
