"""Tests for SVG document reconstruction and decoding."""

import pytest
from lxml import etree

from svg import (
    SVG_NS,
    decode_svg_document,
    format_number,
    reconstruct_svg_document,
    render_preview,
)
from utils import ExportDecodeError, IconEntry


def entry(body="<path d='M0 0h24v24H0z'/>", **kwargs):
    return IconEntry(name="test", body=body, **kwargs)


class TestReconstructSvgDocument:
    def test_standalone_document(self):
        document = reconstruct_svg_document(entry(width=16, height=20))
        lines = document.splitlines()

        assert lines[0] == '<?xml version="1.0" standalone="no"?>'
        assert lines[1].startswith('<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN"')
        assert 'xmlns="http://www.w3.org/2000/svg"' in document
        assert 'xmlns:xlink="http://www.w3.org/1999/xlink"' in document
        assert 'width="16" height="20" viewBox="0 0 16 20"' in document
        assert "<path d='M0 0h24v24H0z'/>" in document
        assert document.endswith("</svg>")

    def test_falls_back_to_24(self):
        document = reconstruct_svg_document(entry())
        assert 'width="24" height="24" viewBox="0 0 24 24"' in document

    def test_zero_size_falls_back(self):
        document = reconstruct_svg_document(entry(width=0, height=0))
        assert 'width="24" height="24"' in document

    def test_body_with_braces(self):
        body = "<style>.a{fill:red}</style><path class='a'/>"
        assert body in reconstruct_svg_document(entry(body=body))


class TestDecodeSvgDocument:
    def test_dimensions_survive_decoding(self):
        root = decode_svg_document(reconstruct_svg_document(entry(width=32, height=32)))
        assert etree.QName(root).namespace == SVG_NS
        assert root.get("width") == "32"
        assert root.get("height") == "32"
        assert root.get("viewBox") == "0 0 32 32"
        assert len(root) == 1

    def test_xlink_body(self):
        body = '<defs><path id="p" d="M0 0h1"/></defs><use xlink:href="#p"/>'
        root = decode_svg_document(reconstruct_svg_document(entry(body=body)))
        assert len(root) == 2

    @pytest.mark.parametrize(
        "body",
        ["<path", "<g><path/>", "<path/></svg><svg>", "<path d='1' d='2'/>"],
    )
    def test_malformed_body(self, body):
        with pytest.raises(ExportDecodeError):
            decode_svg_document(reconstruct_svg_document(entry(body=body)))

    def test_wrong_root(self):
        with pytest.raises(ExportDecodeError):
            decode_svg_document("<html><body/></html>")


def test_render_preview():
    preview = render_preview("<path/>", 32, 16)
    assert preview.startswith('<svg class="icon-preview"')
    assert 'viewBox="0 0 32 16"' in preview
    assert preview.endswith("<path/></svg>")


@pytest.mark.parametrize(
    "value, expected",
    [(32, "32"), (32.0, "32"), (24.5, "24.5"), ("16", "16")],
)
def test_format_number(value, expected):
    assert format_number(value) == expected
