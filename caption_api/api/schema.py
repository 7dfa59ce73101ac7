"""
Purpose:
- Request model for /image and lenient parsing of its query strings.
- Integers parse like a browser would: a leading digit run counts, anything
  else (missing, junk, zero, negative) falls back to the default.
"""

from __future__ import annotations
import re
from typing import Optional
from pydantic import BaseModel, Field

from ..core.settings import Settings

_LEADING_INT = re.compile(r"^\s*([+-]?)(\d+)")
# longer digit runs are junk, not ids or sizes
MAX_DIGITS = 9

def parse_positive_int(raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    m = _LEADING_INT.match(str(raw))
    if not m:
        return default
    if len(m.group(2)) > MAX_DIGITS:
        return default
    value = int(m.group(1) + m.group(2))
    return value if value > 0 else default

class CaptionRequest(BaseModel):
    image_id: int = Field(1, ge=1, description="Base image id; selects <id>.jpg")
    text: str = Field("안녕하세요", description="Body caption; newlines split paragraphs")
    name: str = Field("", description="Name label")
    stat: str = Field("stat", description="Secondary label, raw (not yet normalized)")
    font_size: int = Field(28, ge=1, description="Base font size")

    @classmethod
    def from_query(
        cls,
        cfg: Settings,
        img: Optional[str] = None,
        text: Optional[str] = None,
        name: Optional[str] = None,
        stat: Optional[str] = None,
        size: Optional[str] = None,
    ) -> "CaptionRequest":
        return cls(
            image_id=parse_positive_int(img, cfg.default_image_id),
            text=text or cfg.default_text,
            name=name or "",
            stat=stat or cfg.default_stat,
            font_size=parse_positive_int(size, cfg.default_font_size),
        )
