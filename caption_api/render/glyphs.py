"""
Purpose:
- Two interchangeable ways to draw a label:
    GlyphPathRenderer : glyph outlines from the font (fontTools) as one filled path
    PlainTextRenderer : an SVG <text> run in the fallback font stack
- render_label() tries glyph paths first and falls back to plain text per string.

Notes:
- The font is optional; a missing or unreadable file just means plain text everywhere.
- Glyphs are laid out by advance width plus pair kerning (GPOS or legacy kern); no shaping.
"""

from __future__ import annotations
import base64
import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

from fontTools.pens.svgPathPen import SVGPathPen
from fontTools.pens.transformPen import TransformPen
from fontTools.ttLib import TTFont

from ..core.errors import FontUnavailableError
from .overlay import Directive, PathDirective, TextDirective

logger = logging.getLogger(__name__)

def _ntos(value: float) -> str:
    # 2-decimal coordinates with trailing zeros stripped
    s = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if s in ("-0", "") else s

class LabelRenderer(Protocol):
    def render(self, text: str, x: int, y: int, size: int) -> Directive: ...

class PlainTextRenderer:
    """Always succeeds; escaping happens when the directive is serialized."""

    def render(self, text: str, x: int, y: int, size: int) -> Directive:
        return TextDirective(x=x, y=y, font_size=size, text=text)

def _x_advance(value) -> int:
    return (getattr(value, "XAdvance", 0) or 0) if value is not None else 0

class PairKerning:
    """
    Pair adjustments in font units: GPOS 'kern' lookups when present,
    otherwise the legacy 'kern' table (format 0). First matching subtable wins.
    """

    def __init__(self, font: TTFont):
        self.pairs: dict = {}
        self.class_subtables: list = []
        if "GPOS" in font and self._load_gpos(font["GPOS"].table):
            return
        if "kern" in font:
            for sub in font["kern"].kernTables:
                for pair, value in (getattr(sub, "kernTable", None) or {}).items():
                    self.pairs.setdefault(pair, value)

    def _load_gpos(self, gpos) -> bool:
        if not gpos.FeatureList or not gpos.LookupList:
            return False
        indices: list = []
        for rec in gpos.FeatureList.FeatureRecord:
            if rec.FeatureTag == "kern":
                indices.extend(i for i in rec.Feature.LookupListIndex if i not in indices)
        for li in sorted(indices):
            lookup = gpos.LookupList.Lookup[li]
            for sub in lookup.SubTable:
                lookup_type = lookup.LookupType
                if lookup_type == 9:
                    lookup_type = sub.ExtensionLookupType
                    sub = sub.ExtSubTable
                if lookup_type != 2:
                    continue
                if sub.Format == 1:
                    for left, pair_set in zip(sub.Coverage.glyphs, sub.PairSet):
                        for rec in pair_set.PairValueRecord:
                            self.pairs.setdefault((left, rec.SecondGlyph), _x_advance(rec.Value1))
                elif sub.Format == 2:
                    self.class_subtables.append(sub)
        return bool(indices)

    def __call__(self, left: str, right: str) -> int:
        if (left, right) in self.pairs:
            return self.pairs[(left, right)]
        for sub in self.class_subtables:
            if left not in sub.Coverage.glyphs:
                continue
            c1 = sub.ClassDef1.classDefs.get(left, 0) if sub.ClassDef1 else 0
            c2 = sub.ClassDef2.classDefs.get(right, 0) if sub.ClassDef2 else 0
            return _x_advance(sub.Class1Record[c1].Class2Record[c2].Value1)
        return 0

class GlyphPathRenderer:
    def __init__(self, font: TTFont):
        self.font = font
        self.glyph_set = font.getGlyphSet()
        self.cmap = font.getBestCmap() or {}
        self.units_per_em = font["head"].unitsPerEm
        try:
            self.kerning = PairKerning(font)
        except Exception as e:
            logger.warning("kerning unavailable: %s", e)
            self.kerning = None

    def outline(self, text: str, x: float, y: float, size: float) -> str:
        """
        SVG path data for text with its baseline origin at (x, y).
        Font units are scaled to size and the y axis flipped; pair kerning
        from the font is added between glyphs.
        """
        scale = size / self.units_per_em
        pen = SVGPathPen(self.glyph_set, ntos=_ntos)
        names = [self.cmap.get(ord(ch), ".notdef") for ch in text]
        cursor = float(x)
        for i, glyph_name in enumerate(names):
            if glyph_name not in self.glyph_set:
                raise FontUnavailableError(f"no glyph for {text[i]!r}")
            glyph = self.glyph_set[glyph_name]
            glyph.draw(TransformPen(pen, (scale, 0, 0, -scale, cursor, y)))
            cursor += glyph.width * scale
            if self.kerning is not None and i + 1 < len(names):
                cursor += self.kerning(glyph_name, names[i + 1]) * scale
        return pen.getCommands()

    def render(self, text: str, x: int, y: int, size: int) -> Directive:
        d = self.outline(text, x, y, size)
        if not d:
            raise FontUnavailableError(f"empty outline for {text!r}")
        return PathDirective(d=d)

def load_font(font_path: Path) -> Optional[TTFont]:
    """
    Open the font if present; any failure is logged and treated as 'no font'.
    The returned font holds its file open until the caller closes it.
    """
    try:
        if not font_path.exists():
            return None
        return TTFont(str(font_path), lazy=True)
    except Exception as e:
        logger.warning("font load failed (%s): %s", font_path, e)
        return None

def read_font_base64(font_path: Path) -> Optional[str]:
    try:
        if not font_path.exists():
            return None
        return base64.b64encode(font_path.read_bytes()).decode("ascii")
    except OSError as e:
        logger.warning("font read failed (%s): %s", font_path, e)
        return None

def build_renderers(font: Optional[TTFont]) -> Sequence[LabelRenderer]:
    """Glyph paths first when a usable font exists, plain text always last."""
    renderers: list = []
    if font is not None:
        try:
            renderers.append(GlyphPathRenderer(font))
        except Exception as e:
            logger.warning("glyph renderer unavailable: %s", e)
    renderers.append(PlainTextRenderer())
    return renderers

def render_label(renderers: Sequence[LabelRenderer], text: str, x: int, y: int, size: int, label: str = "text") -> Directive:
    """
    Try each renderer in order; the last one (plain text) is expected not to fail.
    """
    for renderer in renderers[:-1]:
        try:
            return renderer.render(text, x, y, size)
        except Exception as e:
            logger.warning("%s path render failed: %s", label, e)
    return renderers[-1].render(text, x, y, size)
