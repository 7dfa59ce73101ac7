"""
Purpose:
- Locate base images, read their size, and flatten an overlay onto them.
- The overlay SVG is rasterized with CairoSVG and alpha-composited with Pillow.

Notes:
- cairosvg is imported inside the render path so the app (and /healthz) still
  start when the native cairo library is missing.
- On failure the overlay markup is dumped to a debug file before re-raising.
"""

from __future__ import annotations
import logging
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image

from ..core.errors import CompositeError, ImageNotFoundError
from .layout import ImageDimensions
from .overlay import OverlayDocument

logger = logging.getLogger(__name__)

MEDIA_TYPES = {
    "png": "image/png",
    "jpeg": "image/jpeg",
}

def media_type_for(fmt: str) -> str:
    return MEDIA_TYPES.get((fmt or "png").lower(), "image/png")

def image_path_for(image_dir: Path, image_id: int, suffix: str = ".jpg") -> Path:
    """Resolve <image_dir>/<id><suffix>; raises ImageNotFoundError if missing."""
    filename = f"{image_id}{suffix}"
    path = Path(image_dir) / filename
    if not path.is_file():
        raise ImageNotFoundError(filename, details={"image_dir": str(image_dir)})
    return path

def read_dimensions(path: Path) -> ImageDimensions:
    # header only; Pillow does not decode pixels until asked
    with Image.open(path) as img:
        width, height = img.size
    return ImageDimensions(width=width, height=height)

def rasterize_svg(svg: str, width: int, height: int) -> Image.Image:
    import cairosvg  # type: ignore
    png_bytes = cairosvg.svg2png(
        bytestring=svg.encode("utf-8"),
        output_width=width,
        output_height=height,
    )
    return Image.open(BytesIO(png_bytes)).convert("RGBA")

def write_debug_svg(svg: str, debug_path: Optional[Path]) -> None:
    if debug_path is None:
        return
    try:
        Path(debug_path).write_text(svg, encoding="utf-8")
        logger.error("composite failed, overlay written to %s", debug_path)
    except OSError as e:
        logger.error("could not write debug overlay %s: %s", debug_path, e)

def composite(
    base_path: Path,
    overlay: OverlayDocument,
    fmt: str = "png",
    jpeg_quality: int = 90,
    debug_svg_path: Optional[Path] = None,
) -> bytes:
    """
    Flatten overlay over the base image and encode it as PNG or JPEG.
    Any failure becomes CompositeError.
    """
    svg = overlay.to_svg()
    try:
        with Image.open(base_path) as src:
            base = src.convert("RGBA")
        layer = rasterize_svg(svg, overlay.width, overlay.height)
        if layer.size != base.size:
            layer = layer.resize(base.size)
        out = Image.alpha_composite(base, layer).resize((overlay.width, overlay.height)).convert("RGB")

        buf = BytesIO()
        if (fmt or "png").lower() == "jpeg":
            out.save(buf, format="JPEG", quality=jpeg_quality)
        else:
            out.save(buf, format="PNG")
        return buf.getvalue()
    except Exception as e:
        write_debug_svg(svg, debug_svg_path)
        raise CompositeError(str(e) or e.__class__.__name__) from e
