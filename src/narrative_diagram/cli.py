from __future__ import annotations

import argparse
import random
from pathlib import Path


def safe_print(msg: str) -> None:
    # Avoid UnicodeEncodeError on Windows CI/console encodings
    try:
        print(msg)
    except UnicodeEncodeError:
        print(msg.encode("utf-8", errors="replace").decode("utf-8"))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="narrative-diagram",
        description="Generate an animated narrative-structure diagram of linked rectangles.",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Output directory (default: $NARRATIVE_DIAGRAM_OUT_DIR or the user pictures dir)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: fresh entropy)")
    parser.add_argument("--rects", type=int, default=8, help="Number of rectangles (default: 8)")
    parser.add_argument("--arrows", type=int, default=24, help="Desired arrow count (default: 24)")
    parser.add_argument("--width", type=int, default=1100, help="Canvas width (default: 1100)")
    parser.add_argument("--height", type=int, default=640, help="Canvas height (default: 640)")
    parser.add_argument("--frames", type=int, default=1, help="Frames to render (default: 1)")
    parser.add_argument("--fps", type=int, default=30, help="GIF frame rate (default: 30)")
    parser.add_argument(
        "--lock",
        action="store_true",
        help="Lock in a fresh static layout before rendering (no flashing).",
    )
    parser.add_argument("--version", action="store_true", help="Print version")

    args = parser.parse_args(argv)

    if args.version:
        try:
            from importlib.metadata import version
            safe_print(f"narrative-diagram {version('narrative-diagram')}")
        except Exception:
            safe_print("narrative-diagram (unknown version)")
        return 0

    # --- imports for pipeline ---
    from narrative_diagram.config import DiagramConfig, get_output_root
    from narrative_diagram.diagram import new_diagram
    from narrative_diagram.errors import DiagramError
    from narrative_diagram.graph_builder import degree_counts
    from narrative_diagram.render import render_animation, save_gif, save_png

    try:
        config = DiagramConfig(
            width=args.width,
            height=args.height,
            rect_count=args.rects,
            arrow_count=args.arrows,
        )
    except ValueError as e:
        safe_print(f"Error: {e}")
        return 2

    if args.frames <= 0 or args.fps <= 0:
        safe_print("Error: --frames and --fps must be > 0")
        return 2

    out_dir = Path(args.out) if args.out else get_output_root()
    out_dir.mkdir(parents=True, exist_ok=True)

    rng = random.Random(args.seed)

    try:
        # ============================
        # Step 1: Build diagram
        # ============================
        diagram = new_diagram(config, rng)
        if args.lock:
            diagram = diagram.lock(rng)

        indeg, outdeg = degree_counts(diagram.edges, config.rect_count)
        safe_print(
            f"Built {len(diagram.arrows)} arrows over {config.rect_count} rects "
            f"(min indegree {min(indeg)}, min outdegree {min(outdeg)})"
        )

        # ============================
        # Step 2: Render frames
        # ============================
        frames, diagram = render_animation(diagram, args.frames, rng)

        # ============================
        # Step 3: Save
        # ============================
        png_path = save_png(frames[-1], out_dir / "narrative-structure.png")
        safe_print(f"Wrote: {png_path}")

        if len(frames) > 1:
            gif_path = save_gif(frames, out_dir / "narrative-structure.gif", fps=args.fps)
            safe_print(f"Wrote: {gif_path}")
    except DiagramError as e:
        safe_print(f"Error: {type(e).__name__}: {e}")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
