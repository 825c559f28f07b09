"""
Command line entry point.

    python -m ddmarker render question.json -o review.png [--svg overlay.svg]
    python -m ddmarker gui question.json
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from ddmarker import __version__
from ddmarker.config import QuestionConfig
from ddmarker.core.errors import DdMarkerError

logger = logging.getLogger("ddmarker")


def _render(args: argparse.Namespace) -> int:
    from ddmarker.output.review import render_review_from_config

    config = QuestionConfig.from_json(args.config)
    image, session = render_review_from_config(config)
    image.save(args.output)
    logger.info(f"Wrote {args.output}")
    if args.svg is not None:
        if session.overlay is None:
            logger.warning("No drop zones to export; SVG not written")
        else:
            args.svg.write_text(session.overlay.to_svg(), encoding="utf-8")
            logger.info(f"Wrote {args.svg}")
    for choice_no, value in session.answers().items():
        logger.info(f"choice{choice_no}: {value or '(none)'}")
    return 0


def _gui(args: argparse.Namespace) -> int:
    from ddmarker.gui.app import run

    return run(args.config)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ddmarker", description="Drag-and-drop marker question tools"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a review image")
    render.add_argument("config", type=Path, help="Question JSON configuration")
    render.add_argument("-o", "--output", type=Path, required=True, help="Output PNG")
    render.add_argument("--svg", type=Path, help="Also write the drop-zone overlay as SVG")
    render.set_defaults(func=_render)

    gui = sub.add_parser("gui", help="Open the question in a window")
    gui.add_argument("config", type=Path, help="Question JSON configuration")
    gui.set_defaults(func=_gui)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return args.func(args)
    except DdMarkerError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
