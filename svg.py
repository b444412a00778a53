import logging
from lxml import etree

from utils import DEFAULT_SIZE, ExportDecodeError, IconEntry, js_number

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

PREVIEW_STYLE = "width: 64px; height: 64px; display: block; margin: 0 auto 15px auto;"

DOCUMENT_TEMPLATE = """<?xml version="1.0" standalone="no"?>
<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" "http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">
<svg xmlns="{svg_ns}" xmlns:xlink="{xlink_ns}"
     width="{width}" height="{height}" viewBox="0 0 {width} {height}">
    {body}
</svg>"""


def format_number(value) -> str:
    return str(js_number(value))


def render_preview(body: str, width, height) -> str:
    """Inline <svg> shown in the gallery card."""
    return (
        f'<svg class="icon-preview" xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" '
        f'viewBox="0 0 {format_number(width)} {format_number(height)}" '
        f'style="{PREVIEW_STYLE}">{body}</svg>'
    )


def reconstruct_svg_document(entry: IconEntry) -> str:
    """Build a standalone SVG 1.1 file around an Iconify body.

    Iconify bodies carry only the inner markup of the <svg> element, so the
    root element, namespaces and size are added here. Missing dimensions
    fall back to 24.
    """
    width = entry.width or DEFAULT_SIZE
    height = entry.height or DEFAULT_SIZE
    return DOCUMENT_TEMPLATE.format(
        svg_ns=SVG_NS,
        xlink_ns=XLINK_NS,
        width=format_number(width),
        height=format_number(height),
        body=entry.body,
    )


def decode_svg_document(document: str):
    """Parse a reconstructed document and return its root <svg> element."""
    # Never fetch the DOCTYPE's external DTD
    parser = etree.XMLParser(load_dtd=False, no_network=True, resolve_entities=False)
    try:
        root = etree.fromstring(document.encode("utf-8"), parser)
    except etree.XMLSyntaxError as e:
        raise ExportDecodeError(f"SVG markup could not be decoded: {e}") from e

    if etree.QName(root).namespace != SVG_NS or etree.QName(root).localname != "svg":
        raise ExportDecodeError(f"Unexpected root element {root.tag}")
    return root


def rasterize_png(root, width, height, scale: int = 2) -> bytes:
    """Render a decoded <svg> element to PNG bytes at scale x its native size."""
    svg_data = etree.tostring(root, encoding="UTF-8")
    out_width = round(width * scale)
    out_height = round(height * scale)
    logging.debug(f"Rasterizing {width}x{height} SVG to {out_width}x{out_height} PNG")
    try:
        import cairosvg

        return cairosvg.svg2png(
            bytestring=svg_data, output_width=out_width, output_height=out_height
        )
    except Exception as e:
        raise ExportDecodeError(f"SVG could not be rasterized: {e}") from e
