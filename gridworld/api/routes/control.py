"""POST /api/v1/control/{action} — world lifecycle and clock controls."""

from __future__ import annotations

from enum import Enum

from fastapi import APIRouter, Depends, Query

from gridworld.api.dependencies import get_caller, get_engine_manager
from gridworld.api.engine_manager import EngineManager
from gridworld.api.schemas import ControlResponse, DropSchema, ShuffleRequest, ShuffleResponse

router = APIRouter()


class ControlAction(str, Enum):
    start = "start"
    stop = "stop"
    restart = "restart"
    tick = "tick"


@router.post("/control/shuffle", response_model=ShuffleResponse)
def shuffle(
    body: ShuffleRequest,
    caller: str = Depends(get_caller),
    manager: EngineManager = Depends(get_engine_manager),
) -> ShuffleResponse:
    drops = manager.machine.shuffle(caller, body.seed_a, body.seed_b)
    return ShuffleResponse(drops=[
        DropSchema(kind=d.kind.name.lower(), amount=d.amount, x=d.position.x, y=d.position.y)
        for d in drops
    ])


@router.post("/control/{action}", response_model=ControlResponse)
def control(
    action: ControlAction,
    caller: str = Depends(get_caller),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    machine = manager.machine

    match action:
        case ControlAction.start:
            was_active = machine.world.active
            machine.start(caller)
            message = "Already accepting players." if was_active else "World started."

        case ControlAction.stop:
            machine.stop(caller)
            message = "World stopped."

        case ControlAction.restart:
            epoch = machine.restart(caller)
            message = f"World restarted (epoch {epoch})."

        case ControlAction.tick:
            manager.step(caller)
            message = "Single tick advanced."

    return ControlResponse(status="ok", message=message,
                           tick=machine.world.tick, epoch=machine.world.epoch)


@router.post("/speed", response_model=ControlResponse)
def set_speed(
    seconds_per_tick: float = Query(1.0, gt=0.0, le=60.0, description="Wall-clock seconds per tick"),
    caller: str = Depends(get_caller),
    manager: EngineManager = Depends(get_engine_manager),
) -> ControlResponse:
    manager.set_tick_rate(caller, seconds_per_tick)
    return ControlResponse(status="ok", message=f"Clock set to {manager.tick_rate:.2f}s per tick.",
                           tick=manager.machine.world.tick, epoch=manager.machine.world.epoch)
