"""GET /api/v1/map — occupancy and deposits of every non-empty cell."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from gridworld.api.dependencies import get_engine_manager
from gridworld.api.engine_manager import EngineManager
from gridworld.api.schemas import CellSchema, MapResponse

router = APIRouter()


@router.get("/map", response_model=MapResponse)
def get_map(manager: EngineManager = Depends(get_engine_manager)) -> MapResponse:
    snap = manager.get_snapshot()
    cells: list[CellSchema] = []
    for i, (occupant, tokens, health) in enumerate(snap.fields):
        if occupant is None and tokens == 0 and health == 0:
            continue
        cells.append(CellSchema(
            x=i % snap.width,
            y=i // snap.width,
            occupant=occupant,
            token_deposit=tokens,
            health_deposit=health,
        ))
    return MapResponse(width=snap.width, height=snap.height, cells=cells)
