from __future__ import annotations

import random

import pytest

from narrative_diagram.config import DiagramConfig
from narrative_diagram.diagram import (
    Diagram,
    make_arrow_style,
    make_rect,
    new_diagram,
    perturb_arrow_style,
    perturb_rect,
    pick_labels,
)
from narrative_diagram.graph_builder import check_graph
from narrative_diagram.schema import Arrow, Edge


def test_new_diagram_satisfies_graph_invariants():
    cfg = DiagramConfig()
    d = new_diagram(cfg, random.Random(0))
    assert len(d.rects) == 8
    assert len(d.arrows) >= 24
    check_graph(d.edges, cfg.rect_count, cfg.arrow_count)
    assert d.label_first != d.label_end
    assert d.flashing
    assert cfg.flash_rate_min <= d.flash_interval < cfg.flash_rate_max


def test_make_rect_ranges():
    cfg = DiagramConfig()
    rng = random.Random(1)
    for _ in range(200):
        r = make_rect(cfg, rng)
        assert cfg.padding <= r.x <= cfg.width - cfg.padding
        assert cfg.padding <= r.y <= cfg.height - cfg.padding
        assert 100 <= r.w <= 200
        assert 50 <= r.h <= 120
        assert 0 <= r.r <= 360
        assert r.weight in (2, 3, 4)


def test_make_arrow_style_ranges():
    rng = random.Random(2)
    for _ in range(200):
        s = make_arrow_style(rng)
        assert 10 <= s.head <= 18
        assert 10 <= s.hue <= 50
        assert s.weight in (2, 3, 4)


def test_pick_labels_distinct():
    rng = random.Random(3)
    for n in (2, 3, 8):
        for _ in range(100):
            a, b = pick_labels(n, rng)
            assert a != b
            assert 0 <= a < n and 0 <= b < n


def test_perturb_rect_stays_in_bounds():
    cfg = DiagramConfig()
    rng = random.Random(4)
    r = make_rect(cfg, rng)
    for _ in range(500):
        r = perturb_rect(r, cfg, rng)
        assert cfg.padding <= r.x <= cfg.width - cfg.padding
        assert cfg.padding <= r.y <= cfg.height - cfg.padding
        assert 80 <= r.w <= 240
        assert 40 <= r.h <= 160
        assert 0 <= r.r <= 360
        assert 0 <= r.hue <= 360
        assert 20 <= r.sat <= 100
        assert 35 <= r.bri <= 100


def test_perturb_arrow_style_stays_in_bounds():
    rng = random.Random(5)
    s = make_arrow_style(rng)
    for _ in range(500):
        s = perturb_arrow_style(s, rng)
        assert 0 <= s.hue <= 360
        assert 25 <= s.sat <= 100
        assert 35 <= s.bri <= 100
        assert 1 <= s.weight <= 5


def test_cycle_keeps_topology():
    d = new_diagram(DiagramConfig(), random.Random(6))
    c = d.cycle(random.Random(7))
    assert c.edges == d.edges
    assert c.rects != d.rects
    assert (c.label_first, c.label_end) == (d.label_first, d.label_end)


def test_tick_waits_for_flash_interval():
    d = new_diagram(DiagramConfig(), random.Random(8))
    rng = random.Random(9)
    assert d.tick(d.flash_interval, rng) is d

    t = d.tick(d.flash_interval + 1, rng)
    assert t is not d
    assert t.last_flash == d.flash_interval + 1
    assert t.edges == d.edges


def test_lock_rebuilds_and_stops_flashing():
    d = new_diagram(DiagramConfig(), random.Random(10))
    locked = d.lock(random.Random(11))
    assert not locked.flashing
    assert locked.label_first != locked.label_end
    check_graph(locked.edges, 8, 24)
    # locked diagrams never animate
    assert locked.tick(10_000, random.Random(12)) is locked
    # the source diagram is unchanged
    assert d.flashing


def test_reset_resumes_flashing():
    d = new_diagram(DiagramConfig(), random.Random(13)).lock(random.Random(14))
    r = d.reset(random.Random(15))
    assert r.flashing
    assert r.config == d.config


def test_shape_tracks_rect_geometry():
    d = new_diagram(DiagramConfig(), random.Random(16))
    rect, shape = d.rects[0], d.shape(0)
    assert shape.center == rect.center
    assert shape.hw == pytest.approx(rect.w / 2)
    assert shape.hh == pytest.approx(rect.h / 2)
    assert shape.theta == rect.r


def test_diagram_rejects_same_labels():
    d = new_diagram(DiagramConfig(), random.Random(17))
    with pytest.raises(ValueError):
        Diagram(config=d.config, rects=d.rects, arrows=d.arrows, label_first=1, label_end=1)


def test_diagram_rejects_wrong_rect_count():
    d = new_diagram(DiagramConfig(), random.Random(18))
    with pytest.raises(ValueError):
        Diagram(config=d.config, rects=d.rects[:-1], arrows=d.arrows)


@pytest.mark.parametrize("labels", [(-1, 0), (0, 8), (9, 2)])
def test_diagram_rejects_out_of_range_labels(labels):
    d = new_diagram(DiagramConfig(), random.Random(19))
    first, end = labels
    with pytest.raises(ValueError, match="out of range"):
        Diagram(config=d.config, rects=d.rects, arrows=d.arrows, label_first=first, label_end=end)


def test_diagram_rejects_arrow_to_unknown_rect():
    d = new_diagram(DiagramConfig(), random.Random(20))
    bad = d.arrows + (Arrow(Edge(0, 8), d.arrows[0].style),)
    with pytest.raises(ValueError, match="unknown rect"):
        Diagram(config=d.config, rects=d.rects, arrows=bad)
