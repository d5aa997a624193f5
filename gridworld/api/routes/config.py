"""GET/PUT /api/v1/config — read and administer world configuration."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from gridworld.api.dependencies import get_caller, get_engine_manager
from gridworld.api.engine_manager import EngineManager
from gridworld.api.schemas import ConfigUpdate, WorldConfigResponse

router = APIRouter()


def _config_response(manager: EngineManager) -> WorldConfigResponse:
    cfg = manager.config
    return WorldConfigResponse(
        world_seed=cfg.world_seed,
        grid_width=cfg.grid_width,
        grid_height=cfg.grid_height,
        max_players=cfg.max_players,
        collect_interval=cfg.collect_interval,
        health_cost_per_move=cfg.health_cost_per_move,
        attrition_divider=cfg.attrition_divider,
        drop_on_collect=cfg.drop_on_collect,
        seconds_per_tick=cfg.seconds_per_tick,
        shuffle_token_amount=cfg.shuffle_token_amount,
        shuffle_health_amount=cfg.shuffle_health_amount,
        tick_rate=manager.tick_rate,
    )


@router.get("/config", response_model=WorldConfigResponse)
def get_config(manager: EngineManager = Depends(get_engine_manager)) -> WorldConfigResponse:
    return _config_response(manager)


@router.put("/config", response_model=WorldConfigResponse)
def update_config(
    body: ConfigUpdate,
    caller: str = Depends(get_caller),
    manager: EngineManager = Depends(get_engine_manager),
) -> WorldConfigResponse:
    changes = body.model_dump(exclude_none=True)
    manager.machine.configure(caller, **changes)
    return _config_response(manager)
