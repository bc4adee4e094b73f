# Uvicorn application factory <https://www.uvicorn.org/#application-factories>
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chat_relay.logging import logger
from chat_relay.managers.broadcaster import Broadcaster
from chat_relay.managers.connection_registry import ConnectionRegistry
from chat_relay.routing import collect_subrouters
from chat_relay.settings import app_settings


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application startup and shutdown handler.

    uvicorn closes every WebSocket with 1012 (service restart) and waits
    for the endpoints to finish before shutdown runs here, so every peer
    has already been evicted and its departure broadcast to the others.
    """
    logger.info("Application startup complete")

    yield

    remaining = await app.state.registry.get_connections()
    if remaining:
        logger.warning(
            f"{len(remaining)} chat connections still attached at shutdown"
        )

    logger.info("Application shutdown complete")


def application() -> FastAPI:
    """
    Initializes and configures the FastAPI application.

    This function sets up:
    - A ConnectionRegistry and a Broadcaster on `app.state`, shared by every
      chat connection of this application.
    - The routers collected by `chat_relay.routing.collect_subrouters()`
      (health, metrics and the chat WebSocket endpoint).
    - `CORSMiddleware` allowing the configured origins.
    - Static frontend assets mounted at "/" when `STATIC_DIR` exists.
    """
    app = FastAPI(
        title="Chat relay",
        description="Real-time group chat relay over WebSocket",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.registry = ConnectionRegistry()
    app.state.broadcaster = Broadcaster(app.state.registry)

    app.include_router(collect_subrouters())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.CORS_ALLOW_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mounted last so it never shadows the API and WebSocket routes
    static_dir = app_settings.STATIC_DIR
    if static_dir and os.path.isdir(static_dir):
        app.mount(
            "/", StaticFiles(directory=static_dir, html=True), name="frontend"
        )
        logger.info(f'Serving static files from "{static_dir}"')

    return app
