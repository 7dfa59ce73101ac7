from pathlib import Path

import pytest
from PIL import Image
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from caption_api.core.settings import settings


def _box_glyph(advance: int = 600):
    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, 700))
    pen.lineTo((advance - 50, 700))
    pen.lineTo((advance - 50, 0))
    pen.closePath()
    return pen.glyph()


def _empty_glyph():
    return TTGlyphPen(None).glyph()


def build_test_font(path: Path, features: str = "") -> Path:
    """
    Tiny TrueType font: a box for every printable ASCII char, empty space, box .notdef.
    features is optional feature-file source (e.g. kern pairs) compiled into GPOS.
    """
    chars = [chr(c) for c in range(0x21, 0x7F)]
    names = {ord(c): f"uni{ord(c):04X}" for c in chars}
    names[0x20] = "space"
    glyph_order = [".notdef", "space"] + [names[ord(c)] for c in chars]

    glyphs = {name: _box_glyph() for name in glyph_order}
    glyphs["space"] = _empty_glyph()
    metrics = {name: (600, 50) for name in glyph_order}
    metrics["space"] = (300, 0)

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap(names)
    fb.setupGlyf(glyphs)
    fb.setupHorizontalMetrics(metrics)
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "CaptionTest", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()
    if features:
        fb.addOpenTypeFeatures(features)
    fb.save(str(path))
    return path


def cairo_available() -> bool:
    try:
        import cairosvg  # noqa: F401
    except (ImportError, OSError):
        return False
    return True


@pytest.fixture
def font_file(tmp_path) -> Path:
    return build_test_font(tmp_path / "CaptionTest.ttf")


@pytest.fixture
def image_dir(tmp_path) -> Path:
    d = tmp_path / "mg"
    d.mkdir()
    Image.new("RGB", (800, 1000), (90, 120, 160)).save(d / "1.jpg", format="JPEG")
    Image.new("RGB", (400, 300), (200, 200, 200)).save(d / "2.jpg", format="JPEG")
    return d


@pytest.fixture
def configured(monkeypatch, tmp_path, image_dir):
    """Point the global settings at temp assets; no font unless a test sets one."""
    monkeypatch.setattr(settings, "image_dir", image_dir)
    monkeypatch.setattr(settings, "font_path", tmp_path / "missing.ttf")
    monkeypatch.setattr(settings, "debug_svg_path", tmp_path / "debug.svg")
    monkeypatch.setattr(settings, "output_format", "png")
    monkeypatch.setattr(settings, "cache_max_age", 600)
    monkeypatch.setattr(settings, "cache_immutable", False)
    monkeypatch.setattr(settings, "strict_stat_decode", False)
    return settings


@pytest.fixture
def captured_svg(monkeypatch):
    """Replace the cairo rasterizer with a transparent layer and keep the markup."""
    from caption_api.render import compositor
    seen = []

    def fake_rasterize(svg, width, height):
        seen.append(svg)
        return Image.new("RGBA", (width, height), (0, 0, 0, 0))

    monkeypatch.setattr(compositor, "rasterize_svg", fake_rasterize)
    return seen


@pytest.fixture
def client(configured):
    from fastapi.testclient import TestClient
    from caption_api.main import app
    return TestClient(app)
