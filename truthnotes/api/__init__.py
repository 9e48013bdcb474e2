from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from truthnotes.api.endpoints import get_endpoints_router
from truthnotes.service import NotesService


def create_app(
    *, service: NotesService, on_shutdown: Callable[[], None] | None = None
) -> FastAPI:
    """Create FastAPI app.

    Args:
        service: Notes service the routes act on
        on_shutdown: Called once when the app shuts down, e.g. to close the remote client
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        yield
        logger.info("Application shutting down")
        if on_shutdown is not None:
            on_shutdown()

    app = FastAPI(title="Truth Notes", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router=get_endpoints_router(service=service))

    return app
