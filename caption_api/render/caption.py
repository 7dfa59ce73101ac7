"""
Purpose:
- Lay out the caption box, name, stat and wrapped body text as an OverlayDocument.
- Bounded output: body lines past the box bottom are dropped, never overflowed.
"""

from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from .glyphs import LabelRenderer, PlainTextRenderer, render_label
from .layout import BOX_OPACITY, ImageDimensions, LayoutGeometry, compute_layout
from .overlay import FontFace, OverlayDocument, RectDirective
from .text import wrap_text

logger = logging.getLogger(__name__)

def body_lines(text: str, max_chars: int) -> List[str]:
    """Split on newlines, skip empty paragraphs, wrap each paragraph."""
    out: List[str] = []
    for paragraph in (text or "").split("\n"):
        if not paragraph:
            continue
        out.extend(wrap_text(paragraph, max_chars))
    return out

def build_overlay(
    dims: ImageDimensions,
    *,
    text: str,
    name: str,
    stat: str,
    font_size: int,
    renderers: Optional[Sequence[LabelRenderer]] = None,
    font_face: Optional[FontFace] = None,
    font_stack: str = "Arial, sans-serif",
) -> OverlayDocument:
    """
    Build the overlay for one request. stat is expected to be normalized already.
    """
    renderers = renderers or [PlainTextRenderer()]
    geo: LayoutGeometry = compute_layout(dims, font_size, name)
    doc = OverlayDocument(width=dims.width, height=dims.height, font_stack=font_stack, font_face=font_face)

    doc.add(RectDirective(
        x=geo.box_margin,
        y=geo.box_top,
        width=geo.box_width,
        height=geo.box_height,
        radius=geo.box_radius,
        opacity=BOX_OPACITY,
    ))

    if name:
        doc.add(render_label(renderers, name, geo.text_x, geo.name_y, geo.name_size, label="name"))

    doc.add(render_label(renderers, str(stat), geo.stat_x, geo.name_y, geo.stat_font_size, label="stat"))

    y = geo.body_y
    dropped = 0
    for line in body_lines(text, geo.max_chars):
        if y >= geo.body_limit:
            dropped += 1
            continue
        doc.add(render_label(renderers, line, geo.text_x, y, geo.font_size, label="line"))
        y += geo.line_height
    if dropped:
        logger.debug("dropped %d body line(s) below the caption box", dropped)

    return doc
