"""
Purpose:
- Centralized configuration using pydantic-settings.
- Reads from environment variables and optional .env file.
- Keeps asset paths, defaults and response policy tunable without code changes.
"""

from typing import List, Optional
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Pydantic v2 config (env file + ignore unexpected env vars)
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API host/port
    host: str = Field(default="0.0.0.0", description="Bind address for FastAPI/Uvicorn")
    port: int = Field(default=3000, description="Port for FastAPI/Uvicorn")

    # CORS
    cors_allow_origins: List[str] = Field(
        default=["http://localhost:3000"],
        description="Allowed origins for browser apps"
    )

    # ---- Assets ----
    # Base images live here as <id><image_suffix>
    image_dir: Path = Field(default=Path("./mg"), description="Directory holding the base images")
    image_suffix: str = Field(default=".jpg")

    # Optional font; missing file means plain-text rendering for every label
    font_path: Path = Field(default=Path("./font/Nanum.ttf"))
    font_family: str = Field(default="Nanum", description="Family name used for the embedded @font-face")
    fallback_font_stack: str = Field(default="'Nanum', Arial, sans-serif")
    embed_font_face: bool = Field(default=True, description="Embed the font as base64 @font-face in the overlay")

    # ---- Request defaults ----
    default_image_id: int = Field(default=1, ge=1)
    default_text: str = Field(default="안녕하세요")
    default_stat: str = Field(default="stat")
    default_font_size: int = Field(default=28, ge=1)

    # ---- Stat normalization ----
    max_stat_len: int = Field(default=400, ge=1)
    strict_stat_decode: bool = Field(default=False)   # two passes + control-char rejection

    # ---- Output ----
    output_format: str = Field(default="png")          # "png" | "jpeg"
    jpeg_quality: int = Field(default=90, ge=1, le=100)
    cache_max_age: int = Field(default=600, ge=0)      # seconds; 31536000 for the one-year policy
    cache_immutable: bool = Field(default=False)

    # Overlay markup is written here when compositing fails (None disables)
    debug_svg_path: Optional[Path] = Field(default=Path("./debug.svg"))

    log_level: str = Field(default="INFO")

settings = Settings()
