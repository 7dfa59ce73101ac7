"""
Purpose:
- Sanity-check critical library versions after upgrades.
- Import the exact modules we use and print versions so we can spot drift immediately.
- Rasterize a tiny SVG to confirm the native cairo library is reachable.
"""

import sys
import fastapi
import uvicorn
import PIL
import fontTools
from pydantic_settings import BaseSettings

print("python", sys.version)
print("fastapi", fastapi.__version__)
print("uvicorn", uvicorn.__version__)
print("pillow", PIL.__version__)
print("fonttools", fontTools.version)
print("pydantic-settings", BaseSettings.__module__.split(".")[0])  # presence check

# cairosvg needs libcairo at import time; this is the usual failure point
import cairosvg
png = cairosvg.svg2png(bytestring=b'<svg xmlns="http://www.w3.org/2000/svg" width="4" height="4"><rect width="4" height="4"/></svg>')
print("cairosvg", cairosvg.__version__, "png_bytes", len(png))
print("OK")
