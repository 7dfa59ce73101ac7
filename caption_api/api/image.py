"""
Purpose:
- GET /image : draw the caption box (name, stat, wrapped body) over a base image.
- 404 when the base image id has no file, 500 with the message on render failure.
- Cache-Control is only a hint to downstream caches; nothing is memoized here.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query, Request
from fastapi.responses import PlainTextResponse, Response

from ..core.errors import CompositeError, ImageNotFoundError
from ..core.settings import Settings, settings
from ..render.caption import build_overlay
from ..render.compositor import composite, image_path_for, media_type_for, read_dimensions
from ..render.glyphs import build_renderers, load_font, read_font_base64
from ..render.overlay import FontFace
from ..render.text import normalize_stat
from .schema import CaptionRequest

logger = logging.getLogger(__name__)

router = APIRouter(tags=["image"])

def cache_control_header(cfg: Settings) -> str:
    value = f"public, max-age={cfg.cache_max_age}"
    return value + ", immutable" if cfg.cache_immutable else value

@router.get("/image")
def caption_image(
    request: Request,
    img: Optional[str] = Query(default=None, description="Base image id"),
    text: Optional[str] = Query(default=None, description="Body caption"),
    name: Optional[str] = Query(default=None, description="Name label"),
    stat: Optional[str] = Query(default=None, description="Stat label (may arrive percent-encoded)"),
    size: Optional[str] = Query(default=None, description="Base font size"),
):
    try:
        req = CaptionRequest.from_query(settings, img=img, text=text, name=name, stat=stat, size=size)
        stat_text = normalize_stat(req.stat, settings.max_stat_len, strict=settings.strict_stat_decode)

        logger.debug("REQ URL: %s", request.url)
        logger.debug("statRaw: %r", req.stat)
        logger.debug("statDecoded: %r", stat_text)

        base_path = image_path_for(settings.image_dir, req.image_id, settings.image_suffix)
        dims = read_dimensions(base_path)

        font = load_font(settings.font_path)
        face = None
        if settings.embed_font_face:
            data = read_font_base64(settings.font_path)
            if data:
                face = FontFace(family=settings.font_family, base64_data=data)

        try:
            overlay = build_overlay(
                dims,
                text=req.text,
                name=req.name,
                stat=stat_text,
                font_size=req.font_size,
                renderers=build_renderers(font),
                font_face=face,
                font_stack=settings.fallback_font_stack,
            )
        finally:
            # lazy glyph loading is done once the overlay exists
            if font is not None:
                font.close()

        body = composite(
            base_path,
            overlay,
            fmt=settings.output_format,
            jpeg_quality=settings.jpeg_quality,
            debug_svg_path=settings.debug_svg_path,
        )
        return Response(
            content=body,
            media_type=media_type_for(settings.output_format),
            headers={"Cache-Control": cache_control_header(settings)},
        )
    except ImageNotFoundError as e:
        logger.info("image lookup failed: %s", e.to_dict())
        return PlainTextResponse(str(e), status_code=404)
    except CompositeError as e:
        logger.error("composite failed: %s", e.to_dict())
        return PlainTextResponse(f"Error: {e}", status_code=500)
    except Exception as e:
        logger.error("caption render failed: %s", e)
        return PlainTextResponse(f"Error: {e}", status_code=500)
