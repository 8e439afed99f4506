from __future__ import annotations

import random
from collections.abc import Iterable

from narrative_diagram.errors import (
    GraphInvariantError,
    InvalidNodeCountError,
    SamplingExhaustedError,
)
from narrative_diagram.schema import Edge

MIN_INDEGREE = 3
MIN_OUTDEGREE = 2

# Two distinct non-self targets per node need at least 3 nodes.
MIN_NODES = MIN_OUTDEGREE + 1
RECOMMENDED_MIN_NODES = 4

# Per rejection loop; never reached by a healthy random stream.
DEFAULT_MAX_DRAWS = 10_000


def min_edge_count(node_count: int, desired_arrow_count: int = 0) -> int:
    return max(desired_arrow_count, MIN_INDEGREE * node_count)


def validate_node_count(node_count: int) -> None:
    if node_count < MIN_NODES:
        raise InvalidNodeCountError(
            f"node_count must be >= {MIN_NODES} (got {node_count}): each node needs "
            f"{MIN_OUTDEGREE} distinct targets other than itself"
        )


class _Sampler:
    """Uniform node draws; each rejection loop gets its own cap of `max_draws` draws."""

    def __init__(self, rng: random.Random, node_count: int, max_draws: int) -> None:
        self._rng = rng
        self._n = node_count
        self._max_draws = max_draws

    def _exhausted(self) -> SamplingExhaustedError:
        return SamplingExhaustedError(
            f"rejection sampling exceeded {self._max_draws} draws for node_count={self._n}"
        )

    def draw(self) -> int:
        return self._rng.randrange(self._n)

    def draw_other(self, exclude: int) -> int:
        for _ in range(self._max_draws):
            s = self.draw()
            if s != exclude:
                return s
        raise self._exhausted()

    def distinct_others(self, exclude: int, k: int) -> list[int]:
        # insertion order kept so seeded runs are reproducible
        picked: dict[int, None] = {}
        for _ in range(self._max_draws):
            if len(picked) == k:
                break
            picked[self.draw_other(exclude)] = None
        if len(picked) < k:
            raise self._exhausted()
        return list(picked)


def build_graph(
    node_count: int,
    desired_arrow_count: int,
    rng: random.Random | None = None,
    *,
    max_draws: int = DEFAULT_MAX_DRAWS,
) -> list[Edge]:
    """
    Build a directed multigraph over node ids [0, node_count) where every node has
      - indegree >= 3
      - outdegree >= 2
    No self-loops. Duplicate edges are allowed.

    The result has at least max(desired_arrow_count, 3 * node_count) edges.
    Pass a seeded `random.Random` for reproducible output.
    """
    validate_node_count(node_count)
    rng = rng or random.Random()
    sampler = _Sampler(rng, node_count, max_draws)

    total = min_edge_count(node_count, desired_arrow_count)
    indeg = [0] * node_count
    outdeg = [0] * node_count
    edges: list[Edge] = []

    def emit(a: int, b: int) -> None:
        edges.append(Edge(a, b))
        outdeg[a] += 1
        indeg[b] += 1

    # 1) outdegree floor: distinct targets per node
    for i in range(node_count):
        for t in sampler.distinct_others(i, MIN_OUTDEGREE):
            emit(i, t)

    # 2) indegree floor
    for j in range(node_count):
        while indeg[j] < MIN_INDEGREE:
            emit(sampler.draw_other(j), j)

    # 3) fill up to the target count
    while len(edges) < total:
        a = sampler.draw()
        emit(a, sampler.draw_other(a))

    return edges


def degree_counts(edges: Iterable[Edge], node_count: int) -> tuple[list[int], list[int]]:
    """Return (indegree, outdegree) lists indexed by node id."""
    indeg = [0] * node_count
    outdeg = [0] * node_count
    for e in edges:
        outdeg[e.source] += 1
        indeg[e.target] += 1
    return indeg, outdeg


def check_graph(edges: list[Edge], node_count: int, desired_arrow_count: int = 0) -> None:
    """Raise GraphInvariantError on the first violated invariant."""
    for k, e in enumerate(edges):
        if not (0 <= e.source < node_count and 0 <= e.target < node_count):
            raise GraphInvariantError(f"Edge[{k}] {e.source}->{e.target} references unknown node")
        if e.source == e.target:
            raise GraphInvariantError(f"Edge[{k}] is a self-loop on node {e.source}")

    indeg, outdeg = degree_counts(edges, node_count)
    for i in range(node_count):
        if indeg[i] < MIN_INDEGREE:
            raise GraphInvariantError(f"Node {i} indegree {indeg[i]} < {MIN_INDEGREE}")
        if outdeg[i] < MIN_OUTDEGREE:
            raise GraphInvariantError(f"Node {i} outdegree {outdeg[i]} < {MIN_OUTDEGREE}")

    need = min_edge_count(node_count, desired_arrow_count)
    if len(edges) < need:
        raise GraphInvariantError(f"Graph has {len(edges)} edges, expected at least {need}")
