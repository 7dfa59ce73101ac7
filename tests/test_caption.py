import pytest

from caption_api.render.caption import body_lines, build_overlay
from caption_api.render.glyphs import PlainTextRenderer
from caption_api.render.layout import ImageDimensions, compute_layout, stat_anchor_x
from caption_api.render.overlay import FontFace, PathDirective, RectDirective, TextDirective

DIMS = ImageDimensions(width=800, height=1000)


def test_layout_matches_reference_scenario():
    geo = compute_layout(DIMS, 28, "Sua")
    assert geo.box_height == 200
    assert geo.box_top == 780
    assert geo.box_width == 760
    assert geo.name_size == 36
    assert geo.stat_font_size == 21
    assert geo.name_y == 839
    assert geo.body_y == 880
    assert geo.line_height == 36
    assert geo.max_chars == 44
    assert geo.body_limit == 965


def test_stat_anchor_follows_name_length():
    # 20 + 40 + floor(3 * 36 * 0.55) + 40
    assert stat_anchor_x("Sua", 36, 760) == 159
    assert stat_anchor_x("", 36, 760) == 100


def test_stat_anchor_is_clamped_inside_box():
    geo = compute_layout(DIMS, 28, "N" * 100)
    assert geo.stat_x == 20 + 760 - 40 - 10


def test_body_lines_skip_empty_paragraphs():
    assert body_lines("one\n\ntwo\n", 40) == ["one", "two"]


def test_two_paragraphs_render_as_two_lines():
    doc = build_overlay(DIMS, text="Line one\nLine two", name="", stat="stat", font_size=28)
    runs = doc.text_runs()
    stat, lines = runs[0], runs[1:]
    assert stat.text == "stat"
    assert [(r.text, r.y) for r in lines] == [("Line one", 880), ("Line two", 916)]


def test_lines_below_box_are_dropped():
    text = "\n".join(f"line {i}" for i in range(10))
    doc = build_overlay(DIMS, text=text, name="", stat="s", font_size=28)
    lines = doc.text_runs()[1:]
    assert [r.y for r in lines] == [880, 916, 952]
    assert all(r.y < 965 for r in lines)


def test_long_paragraph_is_wrapped_by_character_budget():
    doc = build_overlay(DIMS, text="x" * 100, name="", stat="s", font_size=28)
    lines = [r.text for r in doc.text_runs()[1:]]
    assert lines == ["x" * 44, "x" * 44, "x" * 12]


def test_overlay_starts_with_caption_box():
    doc = build_overlay(DIMS, text="Hello", name="Sua", stat="HP 10", font_size=28)
    box = doc.directives[0]
    assert isinstance(box, RectDirective)
    assert (box.x, box.y, box.width, box.height, box.radius) == (20, 780, 760, 200, 15)
    name = doc.directives[1]
    assert isinstance(name, TextDirective)
    assert (name.text, name.x, name.y, name.font_size) == ("Sua", 60, 839, 36)
    stat = doc.directives[2]
    assert (stat.text, stat.x, stat.y, stat.font_size) == ("HP 10", 159, 839, 21)


def test_name_is_skipped_when_empty():
    doc = build_overlay(DIMS, text="Hello", name="", stat="s", font_size=28)
    assert [r.text for r in doc.text_runs()] == ["s", "Hello"]


def test_plain_text_is_escaped_in_markup():
    doc = build_overlay(DIMS, text="a < b & c", name='"Q"', stat="<3", font_size=28)
    svg = doc.to_svg()
    assert "a &lt; b &amp; c" in svg
    assert "&quot;Q&quot;" in svg
    assert "&lt;3" in svg
    assert "<3" not in svg


def test_svg_document_shape():
    face = FontFace(family="Nanum", base64_data="AAAA")
    doc = build_overlay(DIMS, text="Hello", name="", stat="s", font_size=28,
                        font_face=face, font_stack="'Nanum', Arial, sans-serif")
    svg = doc.to_svg()
    assert svg.startswith('<svg width="800" height="1000" xmlns="http://www.w3.org/2000/svg">')
    assert svg.endswith("</svg>")
    assert "@font-face { font-family: 'Nanum';" in svg
    assert "base64,AAAA" in svg
    assert "font-family: 'Nanum', Arial, sans-serif;" in svg
    assert 'opacity="0.6"' in svg


class _Exploding:
    def render(self, text, x, y, size):
        raise RuntimeError("shaping failed")


def test_failing_renderer_falls_back_to_text():
    doc = build_overlay(DIMS, text="Hello", name="Sua", stat="s", font_size=28,
                        renderers=[_Exploding(), PlainTextRenderer()])
    assert [r.text for r in doc.text_runs()] == ["Sua", "s", "Hello"]
    assert doc.paths() == []


class _Pathing:
    def render(self, text, x, y, size):
        return PathDirective(d=f"M{x} {y}Z")


def test_first_successful_renderer_wins():
    doc = build_overlay(DIMS, text="Hello", name="Sua", stat="s", font_size=28,
                        renderers=[_Pathing(), PlainTextRenderer()])
    assert doc.text_runs() == []
    assert [p.d for p in doc.paths()] == ["M60 839Z", "M159 839Z", "M60 880Z"]


@pytest.mark.parametrize("size", [10, 28, 64])
def test_body_never_exceeds_box(size):
    doc = build_overlay(DIMS, text="word " * 400, name="", stat="s", font_size=size)
    geo = compute_layout(DIMS, size)
    for run in doc.text_runs()[1:]:
        assert run.y < geo.box_top + geo.box_height - 15
