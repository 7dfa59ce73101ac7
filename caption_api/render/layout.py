"""
Purpose:
- Caption box geometry as a pure function of image size and font size.
- All ratios are applied with integer arithmetic so floors are exact
  (e.g. size * 1.3 is size * 13 // 10).
"""

from __future__ import annotations
from dataclasses import dataclass

BOX_MARGIN = 20         # gap between image edge and caption box
BOX_PADDING = 30        # box top to name cap height
BOX_RADIUS = 15
BOX_OPACITY = 0.6
TEXT_PADDING = 40       # horizontal inset of text inside the box
LINE_GAP = 8
BOTTOM_GUARD = 15       # body baselines must stay above box bottom - this

@dataclass(frozen=True)
class ImageDimensions:
    width: int
    height: int

@dataclass(frozen=True)
class LayoutGeometry:
    font_size: int
    name_size: int
    stat_font_size: int
    line_height: int
    box_margin: int
    box_top: int
    box_width: int
    box_height: int
    box_radius: int
    text_x: int
    name_y: int
    body_y: int          # first body baseline
    body_limit: int      # baselines must be strictly below this
    max_chars: int
    stat_x: int

def compute_layout(dims: ImageDimensions, font_size: int, name: str = "") -> LayoutGeometry:
    """
    Place the caption box at the bottom of the image and derive baselines,
    the per-line character budget and the clamped stat anchor.
    """
    size = int(font_size)
    name_size = size * 13 // 10
    stat_font_size = name_size * 3 // 5
    line_height = size + LINE_GAP

    box_height = dims.height * 20 // 100
    box_top = dims.height - box_height - BOX_MARGIN
    box_width = dims.width - BOX_MARGIN * 2

    # ascent factor 0.8 on the unrounded name scale (size * 1.3 * 0.8)
    name_y = box_top + BOX_PADDING + size * 104 // 100
    body_y = name_y + line_height + 5

    # average glyph width heuristic: size * 0.55
    max_width = box_width - TEXT_PADDING * 2
    max_chars = max_width * 20 // (size * 11) if size > 0 else 0

    text_x = BOX_MARGIN + TEXT_PADDING
    stat_x = stat_anchor_x(name, name_size, box_width)

    return LayoutGeometry(
        font_size=size,
        name_size=name_size,
        stat_font_size=stat_font_size,
        line_height=line_height,
        box_margin=BOX_MARGIN,
        box_top=box_top,
        box_width=box_width,
        box_height=box_height,
        box_radius=BOX_RADIUS,
        text_x=text_x,
        name_y=name_y,
        body_y=body_y,
        body_limit=box_top + box_height - BOTTOM_GUARD,
        max_chars=max_chars,
        stat_x=stat_x,
    )

def stat_anchor_x(name: str, name_size: int, box_width: int) -> int:
    """Right of the name (by character count), clamped inside the box's right inset."""
    offset = len(name or "") * name_size * 11 // 20
    wanted = BOX_MARGIN + TEXT_PADDING + offset + 40
    limit = BOX_MARGIN + box_width - TEXT_PADDING - 10
    return min(wanted, limit)
