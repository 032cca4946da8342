"""
Command-line export of a photo folder to print-ready A4 sheets.

    photo-sheets export holiday/ -o holiday.pdf --template hero5
    photo-sheets plan 14 --per-page 6
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from photo_sheets.crops.persistence import JsonCropFile
from photo_sheets.filters import PRESETS
from photo_sheets.layout.planner import TEMPLATES
from photo_sheets.options import SheetOptions
from photo_sheets.output.renderer import DEFAULT_DPI, ExportError, render_to_pdf
from photo_sheets.photos.source import list_photos
from photo_sheets.session import SheetSession

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="photo-sheets", description="Arrange photos onto A4 sheets.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    layout = argparse.ArgumentParser(add_help=False)
    layout.add_argument("--per-page", type=int, default=6, help="Photos per page for the auto template (1-64)")
    layout.add_argument("--template", choices=TEMPLATES, default="auto")
    layout.add_argument("--orientation", choices=("portrait", "landscape"), default="portrait")
    layout.add_argument("--margin", type=float, default=8, help="Margin in mm (0-40)")
    layout.add_argument("--gap", type=float, default=3, help="Gap between photos in mm (0-20)")

    export = sub.add_parser("export", parents=[layout], help="Export a folder to PDF")
    export.add_argument("folder", type=Path)
    export.add_argument("-o", "--output", type=Path, required=True)
    export.add_argument("--fit", choices=("cover", "contain"), default="cover")
    export.add_argument("--bars", choices=("white", "black", "blur"), default="white")
    export.add_argument("--preset", choices=tuple(PRESETS), default="none")
    export.add_argument("--no-separators", action="store_true")
    export.add_argument("--crops", type=Path, help="JSON crop file saved by the editor")
    export.add_argument("--dpi", type=int, default=DEFAULT_DPI)

    plan_cmd = sub.add_parser("plan", parents=[layout], help="Show the grid and page split for a photo count")
    plan_cmd.add_argument("count", type=int)
    return parser


def _options_from_args(args: argparse.Namespace) -> SheetOptions:
    options = SheetOptions(
        photos_per_page=args.per_page,
        orientation=args.orientation,
        margin_mm=args.margin,
        gap_mm=args.gap,
        layout_template=args.template,
    )
    if args.command == "export":
        options.fit_mode = args.fit
        options.bar_fill = args.bars
        options.show_separators = not args.no_separators
        options.apply_preset(args.preset)
    return options


def _export(args: argparse.Namespace) -> int:
    persistence = JsonCropFile(args.crops) if args.crops else None
    session = SheetSession(_options_from_args(args), persistence=persistence)
    try:
        photos = list_photos(args.folder)
        if not photos:
            raise ExportError(f"No photos found in {args.folder}")
        session.load_photos(photos)
        pages = render_to_pdf(session.render(), args.output, dpi=args.dpi)
    finally:
        session.close()
    print(f"Wrote {pages} page(s) to {args.output}")
    return 0


def _plan(args: argparse.Namespace) -> int:
    from photo_sheets.layout.models import Photo

    session = SheetSession(_options_from_args(args))
    session.load_photos([Photo(id=str(i), name=str(i)) for i in range(max(0, args.count))])
    state = session.render()
    if state.advisory:
        raise ExportError(state.advisory)
    sizes = [len(page.cells) for page in state.pages]
    print(f"Layout: {state.layout.label}")
    print(f"Pages: {len(sizes)} {sizes}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "export":
            return _export(args)
        return _plan(args)
    except ExportError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
