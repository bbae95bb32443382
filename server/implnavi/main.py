import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse

from .api.analyze import router as analyze_router
from .core.llm_client import GeminiClient
from .utils.config import Settings, load_settings
from .utils.file_helpers import resolve_static

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def _mount_spa(app: FastAPI, static_dir: Path) -> None:
    if not static_dir.is_dir():
        logger.warning("Static directory not found: %s (UI will not be served)", static_dir)
        return

    @app.get("/{full_path:path}", include_in_schema=False)
    async def spa(full_path: str):
        target = resolve_static(static_dir, full_path)
        if target is None:
            raise HTTPException(status_code=404, detail="Not Found")
        return FileResponse(target)


def create_app(settings: Optional[Settings] = None, model_client: Optional[GeminiClient] = None) -> FastAPI:
    settings = settings or load_settings()
    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; /analyze will fail")

    app = FastAPI(title="Implementation Navigator")
    app.state.settings = settings
    app.state.model_client = model_client or GeminiClient(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(analyze_router)
    # catch-all goes last so the API routes win
    _mount_spa(app, Path(settings.static_dir))
    return app


def run() -> None:
    import uvicorn

    settings = load_settings()
    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info("API on :%d", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
