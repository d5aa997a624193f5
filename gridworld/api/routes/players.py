"""/api/v1/players — mint, join, move and collect on behalf of the caller."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends

from gridworld.api.dependencies import get_caller, get_engine_manager
from gridworld.api.engine_manager import EngineManager
from gridworld.api.routes.state import player_schema
from gridworld.api.schemas import (
    CollectResponse,
    MintRequest,
    MintResponse,
    PlayerSchema,
    PositionResponse,
)
from gridworld.core.enums import Direction

router = APIRouter(prefix="/players")


class MoveDirection(str, Enum):
    up = "up"
    down = "down"
    left = "left"
    right = "right"


class CollectKind(str, Enum):
    tokens = "tokens"
    health = "health"


@router.post("/mint", response_model=MintResponse, status_code=201)
def mint(
    body: MintRequest | None = None,
    caller: str = Depends(get_caller),
    manager: EngineManager = Depends(get_engine_manager),
) -> MintResponse:
    pid = manager.mint(caller, body.health if body else None)
    return MintResponse(player_id=pid, owner=caller, health=manager.characters.health_of(pid))


@router.get("/{player_id}", response_model=PlayerSchema)
def get_player(
    player_id: int,
    manager: EngineManager = Depends(get_engine_manager),
) -> PlayerSchema:
    return player_schema(manager, player_id)


@router.post("/{player_id}/join", response_model=PositionResponse)
def join(
    player_id: int,
    caller: str = Depends(get_caller),
    manager: EngineManager = Depends(get_engine_manager),
) -> PositionResponse:
    pos = manager.machine.join(caller, player_id)
    return PositionResponse(player_id=player_id, x=pos.x, y=pos.y,
                            health=manager.characters.health_of(player_id))


@router.post("/{player_id}/move/{direction}", response_model=PositionResponse)
def move(
    player_id: int,
    direction: MoveDirection,
    caller: str = Depends(get_caller),
    manager: EngineManager = Depends(get_engine_manager),
) -> PositionResponse:
    pos = manager.machine.move(caller, player_id, Direction[direction.name.upper()])
    return PositionResponse(player_id=player_id, x=pos.x, y=pos.y,
                            health=manager.characters.health_of(player_id))


@router.post("/{player_id}/collect/{kind}", response_model=CollectResponse)
def collect(
    player_id: int,
    kind: CollectKind,
    caller: str = Depends(get_caller),
    manager: EngineManager = Depends(get_engine_manager),
) -> CollectResponse:
    match kind:
        case CollectKind.tokens:
            amount = manager.machine.collect_tokens(caller, player_id)
        case CollectKind.health:
            amount = manager.machine.collect_health(caller, player_id)
    return CollectResponse(
        player_id=player_id,
        kind=kind.value,
        amount=amount,
        balance=manager.ledger.balance_of(caller),
        health=manager.characters.health_of(player_id),
    )
