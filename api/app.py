from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reading_room.config import ServerSettings
from reading_room.presence import RegistrySweeper

from api.dependencies import ReaderState, build_state, get_state
from api.routes.document import router as document_router
from api.routes.positions import router as positions_router

logger = logging.getLogger(__name__)


def create_app(settings: Optional[ServerSettings] = None, state: Optional[ReaderState] = None) -> FastAPI:
    """
    Build the HTTP app. When no prebuilt state is given, the book is loaded
    during startup and any load failure aborts startup.
    """
    settings = settings or ServerSettings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "reader", None) is None:
            app.state.reader = build_state(settings)
        sweeper = RegistrySweeper(app.state.reader.registry, interval=settings.sweep_interval)
        sweeper.start()
        try:
            yield
        finally:
            await sweeper.stop()

    app = FastAPI(title="Reading Room API", version="0.1.0", lifespan=lifespan)
    app.state.reader = state
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(document_router)
    app.include_router(positions_router)

    @app.get("/health")
    def health(reader: ReaderState = Depends(get_state)) -> dict:
        logger.info("GET /health")
        return {"status": "ok", "requires_password": reader.gate.requires_password}

    return app


app = create_app()
