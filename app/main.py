from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from app.api.routes import router
from app.config import Settings, load_settings
from app.session_manager import SessionManager

APP_NAME = "tetrachord-duel"
APP_VERSION = "0.1.0"

logger = logging.getLogger(__name__)

_app_dir = Path(__file__).resolve().parent
_static_dir = _app_dir / "static"


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or load_settings()
    manager = SessionManager(settings=settings)

    @asynccontextmanager
    async def _lifespan(_: FastAPI) -> AsyncIterator[None]:
        logger.info("%s listening on port %d", APP_NAME, settings.port)
        yield
        await manager.shutdown()

    app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=_lifespan)
    app.state.settings = settings
    app.state.session_manager = manager
    app.include_router(router)

    # The browser client is shipped separately; serve it only when it's present.
    if _static_dir.exists():
        app.mount("/ui", StaticFiles(directory=str(_static_dir), html=True), name="ui")

        @app.get("/")
        async def _root() -> RedirectResponse:
            return RedirectResponse(url="/ui/")

    @app.get("/info")
    async def info() -> dict[str, str]:
        return {"name": APP_NAME, "version": APP_VERSION}

    return app


_settings = load_settings()
# Configure logging
logging.basicConfig(level=_settings.log_level)

app = create_app(_settings)
