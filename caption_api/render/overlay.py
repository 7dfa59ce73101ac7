"""
Purpose:
- Overlay document: an ordered list of draw directives serialized to SVG.
- Directives are positioned in image pixels; the SVG canvas matches the base image.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Union

from .text import escape_xml

SVG_NS = "http://www.w3.org/2000/svg"

@dataclass
class RectDirective:
    x: int
    y: int
    width: int
    height: int
    radius: int
    fill: str = "black"
    opacity: float = 0.6

    def to_svg(self) -> str:
        return (
            f'<rect x="{self.x}" y="{self.y}" width="{self.width}" height="{self.height}" '
            f'rx="{self.radius}" ry="{self.radius}" fill="{self.fill}" opacity="{self.opacity}" />'
        )

@dataclass
class PathDirective:
    d: str
    fill: str = "white"

    def to_svg(self) -> str:
        return f'<path d="{self.d}" fill="{self.fill}" />'

@dataclass
class TextDirective:
    x: int
    y: int
    font_size: int
    text: str            # raw; escaped on serialization
    fill: str = "white"

    def to_svg(self) -> str:
        return (
            f'<text x="{self.x}" y="{self.y}" font-size="{self.font_size}" fill="{self.fill}" '
            f'class="text shadow">{escape_xml(self.text)}</text>'
        )

Directive = Union[RectDirective, PathDirective, TextDirective]

@dataclass
class FontFace:
    family: str
    base64_data: str

    def to_css(self) -> str:
        return (
            f"@font-face {{ font-family: '{self.family}'; "
            f"src: url('data:font/truetype;charset=utf-8;base64,{self.base64_data}') format('truetype'); }}"
        )

@dataclass
class OverlayDocument:
    width: int
    height: int
    font_stack: str = "Arial, sans-serif"
    font_face: Optional[FontFace] = None
    directives: List[Directive] = field(default_factory=list)

    def add(self, directive: Directive) -> None:
        self.directives.append(directive)

    def text_runs(self) -> List[TextDirective]:
        return [d for d in self.directives if isinstance(d, TextDirective)]

    def paths(self) -> List[PathDirective]:
        return [d for d in self.directives if isinstance(d, PathDirective)]

    def to_svg(self) -> str:
        face = self.font_face.to_css() if self.font_face else ""
        parts = [
            f'<svg width="{self.width}" height="{self.height}" xmlns="{SVG_NS}">',
            "<defs><style>",
            face,
            f".text {{ font-family: {self.font_stack}; font-weight: bold; }}",
            ".shadow { filter: drop-shadow(2px 2px 4px rgba(0,0,0,0.8)); }",
            "</style></defs>",
        ]
        parts.extend(d.to_svg() for d in self.directives)
        parts.append("</svg>")
        return "\n".join(p for p in parts if p)
