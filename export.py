#!python3
"""Export icons from a generated gallery page as standalone SVG or PNG files."""

import argparse
import json
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import Dict, Optional, Tuple

from lxml import html
from tqdm import tqdm

from svg import decode_svg_document, rasterize_png, reconstruct_svg_document
from utils import (
    DEFAULT_SIZE,
    ExportDataMissing,
    ExportError,
    IconEntry,
    InvalidIconData,
    setup_logging,
)

PAGE = Path("dist/index.html")
OUTPUT = Path("exports/")

PNG_SCALE = 2


def _filename(name: str, suffix: str) -> str:
    # Icon names become file names; keep them inside out_dir
    return name.replace("/", "_").replace("\\", "_") + suffix


def _save(data: bytes, path: Path):
    """Write data to path via a temporary file that is always cleaned up."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".export-", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, path)
    finally:
        if os.path.exists(tmp):
            os.unlink(tmp)


def export_svg_file(entry: IconEntry, name: str, out_dir: Path) -> Path:
    document = reconstruct_svg_document(entry)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / _filename(name, ".svg")
    _save(document.encode("utf-8"), path)
    logging.info(f"Exported {path}")
    return path


def export_png_file(entry: IconEntry, name: str, out_dir: Path, scale: int = PNG_SCALE) -> Path:
    """Rasterize the icon at scale x its native size and save it as <name>.png.

    The SVG is decoded before anything is drawn, so a malformed body raises
    ExportDecodeError without leaving a file behind.
    """
    root = decode_svg_document(reconstruct_svg_document(entry))
    png = rasterize_png(
        root, entry.width or DEFAULT_SIZE, entry.height or DEFAULT_SIZE, scale
    )
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / _filename(name, ".png")
    _save(png, path)
    logging.info(f"Exported {path}")
    return path


HANDLERS = {
    "svg": export_svg_file,
    "png": export_png_file,
}


def read_trigger(element) -> Tuple[str, IconEntry]:
    """Read the icon name and entry back out of an export button."""
    name = element.get("data-icon-name")
    payload = element.get("data-icon-data")
    if not name or not payload:
        raise ExportDataMissing(
            f"Export button is missing data-icon-name or data-icon-data (line {element.sourceline})"
        )

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise ExportDataMissing(f"Icon data for {name!r} is not valid JSON: {e}") from e

    try:
        entry = IconEntry.from_dict(name, data)
    except InvalidIconData as e:
        raise ExportDataMissing(str(e)) from e
    return name, entry


def handle_trigger(element, out_dir: Path) -> Optional[Path]:
    """Run the export bound to a button. Failures are logged, not raised."""
    kind = element.get("data-export")
    handler = HANDLERS.get(kind)
    if handler is None:
        logging.error(f"No export handler for {kind!r}")
        return None
    try:
        name, entry = read_trigger(element)
        return handler(entry, name, out_dir)
    except (ExportError, OSError) as e:
        logging.error(f"Could not export as {kind.upper()}: {e}")
        return None


def find_triggers(page: str, kind: str) -> Dict[str, object]:
    """Map icon name to its export button of the given kind, in page order."""
    doc = html.fromstring(page)
    triggers = {}
    for button in doc.xpath("//button[@data-export=$kind]", kind=kind):
        name = button.get("data-icon-name")
        if name is None:
            logging.warning(f"Export button without an icon name on line {button.sourceline}")
            continue
        triggers.setdefault(name, button)
    return triggers


def main(args) -> int:
    if not args.page.exists():
        logging.error(f"{args.page} not found")
        return 1

    triggers = find_triggers(args.page.read_text(encoding="utf-8"), args.format)
    if args.name:
        missing = [n for n in args.name if n not in triggers]
        for n in missing:
            logging.warning(f"Icon {n} is not in {args.page}")
        triggers = {n: triggers[n] for n in args.name if n in triggers}

    if not triggers:
        logging.error("Nothing to export.")
        return 1

    failed = 0
    for name, button in tqdm(triggers.items(), desc="Exporting icons", unit=" files"):
        if handle_trigger(button, args.output) is None:
            failed += 1

    print(f"Exported {len(triggers) - failed} of {len(triggers)} icons to {args.output}")
    return 1 if failed else 0


def cli():
    parser = argparse.ArgumentParser(description="Export icons from a generated gallery page")
    parser.add_argument(
        "page",
        type=Path,
        nargs="?",
        default=PAGE,
        help="Generated gallery page",
    )
    parser.add_argument(
        "--name",
        action="append",
        help="Icon to export (repeatable, default: all)",
    )
    parser.add_argument(
        "--format",
        choices=sorted(HANDLERS),
        default="svg",
        help="Export format",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=OUTPUT,
        help="Output directory",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    setup_logging()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    sys.exit(main(args))


if __name__ == "__main__":
    cli()
