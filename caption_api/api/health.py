# Common language: Environment/ops check that surfaces library versions, asset paths and font status.
# Use this after deploys to confirm the image directory and font are where settings say.

from fastapi import APIRouter
from ..core.settings import settings
from ..render.glyphs import load_font
from pathlib import Path
import sys, importlib

router = APIRouter(tags=["health"])

def _ver(modname: str) -> str:
    try:
        m = importlib.import_module(modname)
        return getattr(m, "__version__", "unknown")
    except Exception:
        return "not-installed"

def _file_info(p: Path):
    try:
        exists = p.exists()
        size = p.stat().st_size if exists else 0
        return {"path": str(p), "exists": exists, "size": size}
    except Exception:
        return {"path": str(p), "exists": False, "size": 0}

def _image_count(d: Path, suffix: str) -> int:
    try:
        return sum(1 for _ in d.glob(f"*{suffix}")) if d.is_dir() else 0
    except Exception:
        return 0

@router.get("/healthz")
def healthz():
    font = load_font(settings.font_path)
    glyph_paths = font is not None
    if font is not None:
        font.close()
    return {
        "status": "ok",
        "python": sys.version.split()[0],
        "versions": {
            "fastapi": _ver("fastapi"),
            "uvicorn": _ver("uvicorn"),
            "pydantic_settings": _ver("pydantic_settings"),
            "PIL": _ver("PIL"),
            "fontTools": _ver("fontTools"),
            "cairosvg": _ver("cairosvg"),
        },
        "config": {
            "image_dir": str(settings.image_dir),
            "image_count": _image_count(Path(settings.image_dir), settings.image_suffix),
            "output_format": settings.output_format,
            "cache_max_age": settings.cache_max_age,
            "strict_stat_decode": settings.strict_stat_decode,
        },
        "font": {
            **_file_info(Path(settings.font_path)),
            # False means every label renders as plain <text>
            "glyph_paths": glyph_paths,
        },
    }
