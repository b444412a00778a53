#!python3
"""Generate the static icon gallery (dist/index.html) from an Iconify JSON icon set."""

import argparse
import dataclasses
import html
import json
import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import List

from tqdm import tqdm

from svg import render_preview
from utils import (
    DEFAULT_SIZE,
    GalleryError,
    IconEntry,
    IconSet,
    InvalidIconData,
    ParseError,
    SchemaError,
    TemplateError,
    setup_logging,
)

ICONS_JSON = Path("icons.json")
SOURCES = Path("src/")
TEMPLATE_HTML = SOURCES / "index.html"
STYLE_CSS = SOURCES / "style.css"
SCRIPT_JS = SOURCES / "script.js"
OUTPUT = Path("dist/")

# Must appear exactly as written in the template
PLACEHOLDER = '<div id="icon-injection-target"></div>'

NO_ICONS_MESSAGE = '<p id="initial-message">No icons found in the JSON file.</p>'
NO_VALID_ICONS_MESSAGE = '<p id="initial-message">No valid icons found in the JSON file.</p>'


@dataclasses.dataclass(frozen=True)
class BuildConfig:
    icons: Path = ICONS_JSON
    template: Path = TEMPLATE_HTML
    style: Path = STYLE_CSS
    script: Path = SCRIPT_JS
    output: Path = OUTPUT
    placeholder: str = PLACEHOLDER


def escape_html(s: str) -> str:
    return html.escape(s, quote=True)


def escape_single_quoted_attr(s: str) -> str:
    """Make s safe inside a single-quoted attribute. Only the delimiter needs escaping."""
    return s.replace("'", "&#039;")


def _is_object(value) -> bool:
    return isinstance(value, dict)


def _reject_constant(name):
    raise ParseError(f"Icon set is not valid JSON: {name} is not a JSON value")


def load_icon_set(text: str) -> IconSet:
    """Parse and validate the top level of an Iconify JSON document."""
    if not text.strip():
        raise ParseError("Icon set is empty")
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ParseError(f"Icon set is not valid JSON: {e}") from e

    if not _is_object(data):
        raise SchemaError(f"Icon set must be a JSON object, got {type(data).__name__}")
    if "icons" not in data:
        raise SchemaError("Icon set has no 'icons' property")
    if not _is_object(data["icons"]):
        raise SchemaError(
            f"Icon set 'icons' must be an object, got {type(data['icons']).__name__}"
        )
    for attr in ("width", "height"):
        value = data.get(attr)
        if value is not None and (
            isinstance(value, bool) or not isinstance(value, (int, float))
        ):
            raise SchemaError(f"Icon set {attr} must be a number, got {value!r}")

    icon_set = IconSet(
        icons=data["icons"],
        width=data.get("width") or DEFAULT_SIZE,
        height=data.get("height") or DEFAULT_SIZE,
        prefix=data.get("prefix"),
    )
    logging.debug(
        f"Icon set {icon_set.prefix or '(no prefix)'}: {len(icon_set.icons)} icons, "
        f"default size {icon_set.width}x{icon_set.height}"
    )
    return icon_set


def render_icon(entry: IconEntry, default_width, default_height) -> str:
    width, height = entry.size(default_width, default_height)
    safe_name = escape_html(entry.name)
    safe_data = escape_single_quoted_attr(entry.to_json(default_width, default_height))

    buttons = "".join(
        f"""
            <button
                data-export="{kind}"
                data-icon-name="{safe_name}"
                data-icon-data='{safe_data}'>{label}</button>"""
        for kind, label in (("svg", "SVG"), ("png", "PNG"))
    )
    return f"""
    <div class="icon-item">
        {render_preview(entry.body, width, height)}
        <p>{safe_name}</p>
        <div class="icon-buttons">{buttons}
        </div>
    </div>"""


def render_icons(icon_set: IconSet) -> str:
    if not icon_set.icons:
        logging.info("No icons found in the icon set.")
        return NO_ICONS_MESSAGE

    fragments: List[str] = []
    skipped = 0
    for name, data in tqdm(
        icon_set.icons.items(), desc="Rendering icons", unit=" icons", disable=None
    ):
        try:
            entry = IconEntry.from_dict(name, data)
        except InvalidIconData as e:
            logging.warning(f"Skipping {escape_html(name)}: {e}")
            skipped += 1
            continue
        fragments.append(render_icon(entry, icon_set.width, icon_set.height))

    if skipped:
        logging.info(f"Skipped {skipped} icons with invalid data.")
    if not fragments:
        logging.info("None of the icons in the icon set are valid.")
        return NO_VALID_ICONS_MESSAGE
    return "".join(fragments)


def inject(template: str, content: str, placeholder: str = PLACEHOLDER) -> str:
    index = template.find(placeholder)
    if index == -1:
        raise TemplateError(f"Placeholder {placeholder!r} not found in template")
    logging.debug(f"Placeholder found at index {index}")

    page = template.replace(placeholder, content, 1)
    if placeholder in page:
        raise TemplateError(
            f"Placeholder {placeholder!r} is still present after injection "
            f"(at index {page.find(placeholder)})"
        )
    return page


def generate(icon_set_json: str, template: str, placeholder: str = PLACEHOLDER) -> str:
    """Render the gallery page. Pure function of the icon set and the template."""
    icon_set = load_icon_set(icon_set_json)
    return inject(template, render_icons(icon_set), placeholder)


def _read(path: Path, error=ParseError) -> str:
    if not path.exists():
        raise FileNotFoundError(f"{path} not found")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise error(f"{path} is not valid UTF-8: {e}") from e


def build(config: BuildConfig) -> Path:
    """Write the page and its assets. Nothing is written unless generation succeeds."""
    for path in (config.style, config.script):
        if not path.exists():
            raise FileNotFoundError(f"{path} not found")

    logging.info(f"Reading icon set from {config.icons}")
    page = generate(
        _read(config.icons), _read(config.template, TemplateError), config.placeholder
    )

    # Stage next to the output so a failed copy leaves no partial dist/
    config.output.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(tempfile.mkdtemp(dir=config.output.parent, prefix=".gallery-"))
    try:
        (staging / "index.html").write_text(page, encoding="utf-8")
        shutil.copyfile(config.style, staging / "style.css")
        shutil.copyfile(config.script, staging / "script.js")

        config.output.mkdir(exist_ok=True)
        for name in ("style.css", "script.js", "index.html"):
            os.replace(staging / name, config.output / name)
    finally:
        shutil.rmtree(staging, ignore_errors=True)

    page_path = config.output / "index.html"
    logging.info(f"Gallery written to {page_path}")
    return page_path


def main(args) -> int:
    config = BuildConfig(
        icons=args.icons,
        template=args.template,
        style=args.style,
        script=args.script,
        output=args.output,
    )
    try:
        build(config)
    except (GalleryError, OSError) as e:
        logging.error(f"Build failed: {e}")
        return 1
    return 0


def cli():
    parser = argparse.ArgumentParser(
        description="Generate a static icon gallery from an Iconify JSON icon set."
    )
    parser.add_argument("--icons", type=Path, default=ICONS_JSON, help="Iconify JSON file")
    parser.add_argument("--template", type=Path, default=TEMPLATE_HTML, help="HTML template")
    parser.add_argument("--style", type=Path, default=STYLE_CSS, help="Stylesheet to copy")
    parser.add_argument("--script", type=Path, default=SCRIPT_JS, help="Exporter script to copy")
    parser.add_argument("--output", type=Path, default=OUTPUT, help="Output directory")
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
