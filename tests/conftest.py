import json

import pytest

from generate import PLACEHOLDER

TEMPLATE = f"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="UTF-8"><title>Gallery</title></head>
<body>
<main id="icon-gallery">
    {PLACEHOLDER}
</main>
</body>
</html>
"""


@pytest.fixture
def template():
    return TEMPLATE


@pytest.fixture
def icon_set_json():
    def _make(icons, **top):
        return json.dumps({**top, "icons": icons})

    return _make


@pytest.fixture
def sources(tmp_path):
    """A source tree with a template, stylesheet and script, plus a writer for icons.json."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "index.html").write_text(TEMPLATE, encoding="utf-8")
    (src / "style.css").write_text("body { margin: 0; }\n", encoding="utf-8")
    (src / "script.js").write_text("// exporter\n", encoding="utf-8")

    def _write_icons(text):
        path = tmp_path / "icons.json"
        path.write_text(text, encoding="utf-8")
        return path

    return src, _write_icons
