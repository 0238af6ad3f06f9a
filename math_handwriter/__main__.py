#!/usr/bin/env python
"""
CLI entry point for math_handwriter.

Usage:
    python -m math_handwriter --help
    python -m math_handwriter "\\frac{a}{b}" --png out.png
"""

import argparse
import json
import logging
from pathlib import Path

from .configs import HandwriterConfig, setup_logging
from .data.latex_parser import LatexParseError
from .handwriter import Handwriter
from .render import PlanRenderer, save_excalidraw

logger = logging.getLogger('math_handwriter.cli')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="math_handwriter",
        description="Write LaTeX math as timed handwritten pen strokes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Plan summary only
  python -m math_handwriter "x^2 + y^2 = r^2"

  # Final image and animation
  python -m math_handwriter "\\frac{1}{\\sqrt{2}}" --png out.png --gif out.gif --fps 30

  # Reproducible jitter, exported for Excalidraw
  python -m math_handwriter "\\int_0^1 f(x) dx" --seed 7 --excalidraw scene.excalidraw
        """
    )
    defaults = HandwriterConfig()
    parser.add_argument("latex", help="LaTeX math source")
    parser.add_argument("--font-size", type=float, default=defaults.font_size, help="Font size in pixels")
    parser.add_argument("--speed", type=float, default=defaults.speed, help="Pen speed in pixels per second")
    parser.add_argument("--spacing", type=float, default=defaults.spacing,
                        help="Extra advance between characters (fraction of font size)")
    parser.add_argument("--jitter", type=float, default=defaults.variation,
                        help="Handwriting jitter in pixels (0 = exact)")
    parser.add_argument("--seed", "-s", type=int, default=None, help="Random seed for jitter")
    parser.add_argument("--pause", type=float, default=defaults.pause_between_strokes,
                        help="Pause between strokes in ms")
    parser.add_argument("--char-pause", type=float, default=defaults.pause_between_chars,
                        help="Extra pause before each new character in ms")
    parser.add_argument("--fps", type=float, default=30, help="Frame rate for --gif")
    parser.add_argument("--png", type=str, default=None, help="Output path for the final image")
    parser.add_argument("--gif", type=str, default=None, help="Output path for the animation")
    parser.add_argument("--json", type=str, default=None, help="Output path for the drawing plan JSON")
    parser.add_argument("--excalidraw", type=str, default=None, help="Output path for an Excalidraw scene")
    parser.add_argument("--figure", type=str, default=None, help="Output path for a stroke-order figure")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = HandwriterConfig(
            font_size=args.font_size,
            speed=args.speed,
            spacing=args.spacing,
            variation=args.jitter,
            seed=args.seed,
            pause_between_strokes=args.pause,
            pause_between_chars=args.char_pause,
        )
        plan = Handwriter(config).create_drawing_plan(args.latex)
    except LatexParseError as e:
        parser.error(f"could not parse {args.latex!r}: {e}")
    except ValueError as e:
        parser.error(str(e))

    print(f"\n{'='*60}")
    print(f"Drawing plan: {args.latex}")
    print(f"{'='*60}")
    print(f"  Strokes:  {plan.num_strokes}")
    print(f"  Duration: {plan.total_duration:.0f} ms")
    box = plan.bounds
    print(f"  Bounds:   x={box.x:.1f} y={box.y:.1f} w={box.width:.1f} h={box.height:.1f}")

    if args.png or args.gif:
        renderer = PlanRenderer()
        if args.png:
            logger.info("PNG: %s", renderer.save_png(plan, args.png))
        if args.gif:
            logger.info("GIF: %s", renderer.save_gif(plan, args.gif, fps=args.fps))

    if args.json:
        with open(args.json, 'w', encoding='utf-8') as f:
            json.dump(plan.to_dict(), f, indent=2)
        logger.info("Plan JSON: %s", Path(args.json))

    if args.excalidraw:
        logger.info("Excalidraw scene: %s", save_excalidraw(plan, args.excalidraw))

    if args.figure:
        import matplotlib
        matplotlib.use('Agg')
        from .render.visualize import plot_drawing_plan

        fig = plot_drawing_plan(plan)
        fig.savefig(args.figure, dpi=150, bbox_inches='tight', facecolor='white')
        logger.info("Figure: %s", Path(args.figure))

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
