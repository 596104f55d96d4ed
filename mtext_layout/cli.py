"""
Command-line interface for mtext_layout.

Usage:
    mtext-layout "{\\C1;Hello}\\PWorld" --font txt.json --output hello.pdf
    mtext-layout "\\S1/2;" --font arial.ttf --style-font arial --height 2.5 --width 40
"""

import argparse
import logging
import sys
from pathlib import Path

from .api import MTextData, create_registry, render_mtext
from .config import LayoutSettings
from .engine.options import TextStyle
from .exceptions import MTextLayoutError
from .export import PdfPreviewRenderer
from .fonts import StrokeFont, TrueTypeFont
from .utils.logger import LOG_LEVELS, configure_logging

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mtext-layout",
        description="Lay out MText markup and write a PDF preview",
    )
    parser.add_argument("text", help="MText markup to lay out")
    parser.add_argument(
        "--font",
        action="append",
        default=[],
        help="Font file to load: JSON stroke font or TrueType/OpenType (repeatable)"
    )
    parser.add_argument("-o", "--output", default="mtext_preview.pdf", help="Output PDF path")
    parser.add_argument("--style-font", default="", help="Font of the text style (default: first loaded font)")
    parser.add_argument("--height", type=float, default=1.0, help="Text height")
    parser.add_argument("--width", type=float, default=0.0, help="Reference rectangle width, 0 disables wrapping")
    parser.add_argument("--attachment", type=int, choices=range(1, 10), default=1, help="Attachment point 1-9")
    parser.add_argument("--settings", help="Layout settings JSON file")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Log level (default: WARNING)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def load_font(path: str):
    if Path(path).suffix.lower() == ".json":
        return StrokeFont.from_json_file(path)
    return TrueTypeFont(path)


def main(argv=None) -> int:
    args = create_parser().parse_args(argv)
    configure_logging(level=args.log_level, log_file=args.log_file)

    try:
        settings = LayoutSettings.from_json_file(args.settings) if args.settings else LayoutSettings()
        fonts = [load_font(path) for path in args.font]
        registry = create_registry(fonts, settings)
        style_font = args.style_font or (fonts[0].name if fonts else settings.default_font)
        data = MTextData(text=args.text, height=args.height, width=args.width, attachment_point=args.attachment)
        placed = render_mtext(data, TextStyle(font=style_font), registry, settings)
        output = PdfPreviewRenderer(args.output).render(placed)
    except MTextLayoutError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    diagnostics = placed.diagnostics
    for label, counts in (
        ("missing characters", diagnostics.unsupported_chars),
        ("missing fonts", diagnostics.missed_fonts),
        ("unsupported text styles", diagnostics.unsupported_text_styles),
    ):
        if counts:
            logger.warning(f"{label}: {', '.join(sorted(counts))}")

    print(f"Saved: {output}")
    return 0
