from __future__ import annotations

import random
import sys

from narrative_diagram.errors import GraphInvariantError
from narrative_diagram.graph_builder import MIN_NODES, build_graph, check_graph

NODE_COUNTS = range(MIN_NODES, 33)
DESIRED_COUNTS = (0, 10, 24, 64)


def main() -> int:
    seeds = int(sys.argv[1]) if len(sys.argv) > 1 else 200
    if seeds <= 0:
        print("Usage: python scripts/ci_verify_graph.py [num-seeds]")
        return 2

    checked = 0
    for n in NODE_COUNTS:
        for desired in DESIRED_COUNTS:
            for seed in range(seeds):
                edges = build_graph(n, desired, random.Random(seed))
                try:
                    check_graph(edges, n, desired)
                except GraphInvariantError as e:
                    print(f"n={n} desired={desired} seed={seed}: {e}")
                    return 1
                checked += 1

    print(f"Graph invariant sanity check: OK ({checked} graphs)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
