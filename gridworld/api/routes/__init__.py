"""Versioned API route modules."""

from fastapi import APIRouter

from gridworld.api.routes.config import router as config_router
from gridworld.api.routes.control import router as control_router
from gridworld.api.routes.map import router as map_router
from gridworld.api.routes.players import router as players_router
from gridworld.api.routes.state import router as state_router
from gridworld.api.schemas import ErrorResponse

# Body of every rejected world operation; see app.ERROR_STATUS.
_ERROR_RESPONSES = {
    status: {"model": ErrorResponse}
    for status in (400, 403, 404, 409, 429)
}

api_router = APIRouter(prefix="/api/v1", responses=_ERROR_RESPONSES)
api_router.include_router(map_router, tags=["Map"])
api_router.include_router(state_router, tags=["State"])
api_router.include_router(players_router, tags=["Players"])
api_router.include_router(control_router, tags=["Control"])
api_router.include_router(config_router, tags=["Config"])

__all__ = ["api_router"]
