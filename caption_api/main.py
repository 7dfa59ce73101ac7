"""
Purpose:
- FastAPI application factory and router mounts.
- Adds CORS for local dev + future domain.
- `caption-api` (or `python -m caption_api.main`) serves it with Uvicorn on settings.host:settings.port.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .core.settings import settings
from .core.logging_utils import configure_logging
from .api.health import router as health_router
from .api.image import router as image_router

def create_app() -> FastAPI:
    configure_logging(settings.log_level)
    app = FastAPI(title="Caption Card API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.include_router(health_router)
    app.include_router(image_router)
    return app

app = create_app()

def run() -> None:
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)

if __name__ == "__main__":
    run()
