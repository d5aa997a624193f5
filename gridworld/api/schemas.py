"""Pydantic request/response models for the REST API."""

from __future__ import annotations

from pydantic import BaseModel, Field


# --- Players ---

class PlayerSchema(BaseModel):
    player_id: int
    owner: str | None = None
    health: int = 0
    x: int | None = None
    y: int | None = None
    in_roster: bool = False
    last_collect_at: int | None = None
    cooldown_remaining: int = 0


class MintRequest(BaseModel):
    health: int | None = Field(None, ge=0, description="Starting health (defaults to config)")


class MintResponse(BaseModel):
    player_id: int
    owner: str
    health: int


class PositionResponse(BaseModel):
    player_id: int
    x: int
    y: int
    health: int


class CollectResponse(BaseModel):
    player_id: int
    kind: str
    amount: int
    balance: int = Field(0, description="Caller's token balance after the pickup")
    health: int = 0


# --- Map ---

class CellSchema(BaseModel):
    x: int
    y: int
    occupant: int | None = None
    token_deposit: int = 0
    health_deposit: int = 0


class MapResponse(BaseModel):
    width: int
    height: int
    cells: list[CellSchema] = Field(description="Non-empty cells only (occupied or holding a deposit)")


# --- World State ---

class EventSchema(BaseModel):
    tick: int
    epoch: int
    category: str
    message: str
    player_ids: list[int] = Field(default_factory=list)
    data: dict = Field(default_factory=dict)


class WorldStateResponse(BaseModel):
    tick: int
    timestamp: int
    epoch: int
    epoch_tick: int
    active: bool
    roster: list[int]
    players: list[PlayerSchema]
    events: list[EventSchema] = Field(default_factory=list)


# --- Control ---

class ControlResponse(BaseModel):
    status: str
    message: str
    tick: int = 0
    epoch: int = 0


class ShuffleRequest(BaseModel):
    seed_a: int
    seed_b: int


class DropSchema(BaseModel):
    kind: str
    amount: int
    x: int
    y: int


class ShuffleResponse(BaseModel):
    drops: list[DropSchema]


# --- Config ---

class WorldConfigResponse(BaseModel):
    world_seed: int
    grid_width: int
    grid_height: int
    max_players: int
    collect_interval: int
    health_cost_per_move: int
    attrition_divider: int
    drop_on_collect: bool
    seconds_per_tick: int
    shuffle_token_amount: int
    shuffle_health_amount: int
    tick_rate: float


class ConfigUpdate(BaseModel):
    collect_interval: int | None = None
    drop_on_collect: bool | None = None
    attrition_divider: int | None = None
    health_cost_per_move: int | None = None
    max_players: int | None = None


# --- Errors ---

class ErrorResponse(BaseModel):
    code: str
    detail: str
