from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from talentdesk.api.errors import install_error_handlers
from talentdesk.api.routes import router as api_router
from talentdesk.config import get_settings
from talentdesk.core.uploads import UPLOAD_URL_PREFIX
from talentdesk.db.init import ensure_data_directories, init_database
from talentdesk.logging_config import configure_logging


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    init_database()
    yield


def create_app() -> FastAPI:
    configure_logging()
    settings = get_settings()
    ensure_data_directories()

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    @app.get("/api/health-check")
    def health() -> dict[str, str]:
        return {"status": "ok", "message": "API is healthy"}

    app.include_router(api_router)
    app.mount(
        UPLOAD_URL_PREFIX.rstrip("/"),
        StaticFiles(directory=str(settings.upload_dir), check_dir=False),
        name="uploads",
    )
    return app
