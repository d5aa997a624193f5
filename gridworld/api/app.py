"""FastAPI application factory with lifespan management."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from gridworld.api.dependencies import set_engine_manager
from gridworld.api.engine_manager import EngineManager
from gridworld.api.routes import api_router
from gridworld.config import WorldConfig
from gridworld.core.errors import (
    CapacityExceededError,
    CooldownNotElapsedError,
    GameNotActiveError,
    InsufficientHealthError,
    InvalidConfigurationError,
    NotJoinedError,
    NothingToCollectError,
    OutOfBoundsError,
    PositionOccupiedError,
    UnauthorizedError,
    WorldError,
)
from gridworld.utils.logging import setup_logging

logger = logging.getLogger(__name__)

# Most specific first; WorldError itself falls through to 400.
ERROR_STATUS: tuple[tuple[type[WorldError], int], ...] = (
    (UnauthorizedError, 403),
    (NotJoinedError, 404),
    (InvalidConfigurationError, 422),
    (GameNotActiveError, 409),
    (CapacityExceededError, 409),
    (OutOfBoundsError, 409),
    (PositionOccupiedError, 409),
    (InsufficientHealthError, 409),
    (CooldownNotElapsedError, 429),
    (NothingToCollectError, 409),
)


def status_for(exc: WorldError) -> int:
    for error_type, status in ERROR_STATUS:
        if isinstance(exc, error_type):
            return status
    return 400


def create_app(config: WorldConfig | None = None, manager: EngineManager | None = None) -> FastAPI:
    """Build and return the fully-configured FastAPI application.

    Passing *manager* skips the lifespan-managed one (tests drive the
    clock by hand).
    """
    if config is None:
        config = WorldConfig()

    _config = config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if manager is not None:
            set_engine_manager(manager)
            yield
            return
        setup_logging(_config.log_level)
        owned = EngineManager(_config)
        set_engine_manager(owned)
        owned.start()
        logger.info("API server started — world clock running.")
        yield
        owned.stop()
        logger.info("API server shutting down.")

    app = FastAPI(
        title="Grid World Engine",
        description=(
            "Authoritative world-state machine for a grid-based collection game.\n\n"
            "## API Groups\n\n"
            "- **State** — Live world state: roster, players, event feed\n"
            "- **Map** — Occupancy and deposits of non-empty cells\n"
            "- **Players** — Mint, join, move, collect (caller from `X-Caller`)\n"
            "- **Control** — Administrative lifecycle: start, stop, restart, shuffle, clock\n"
            "- **Config** — World configuration\n"
        ),
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "State", "description": "Live world state polled by observers."},
            {"name": "Map", "description": "Non-empty cells: occupants and resource deposits."},
            {"name": "Players", "description": "Player-scoped operations, authorized against the character owner."},
            {"name": "Control", "description": "Administrative lifecycle controls and the world clock."},
            {"name": "Config", "description": "World configuration; updates are admin only."},
        ],
    )

    @app.exception_handler(WorldError)
    async def world_error_handler(request: Request, exc: WorldError) -> JSONResponse:
        return JSONResponse(status_code=status_for(exc), content={"code": exc.code, "detail": str(exc)})

    # CORS: allow any origin in dev
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app
