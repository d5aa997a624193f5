"""GET /api/v1/state, /events — dynamic world data polled by observers."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from gridworld.api.dependencies import get_engine_manager
from gridworld.api.engine_manager import EngineManager
from gridworld.api.schemas import EventSchema, PlayerSchema, WorldStateResponse
from gridworld.utils.event_log import WorldEvent

router = APIRouter()


def _serialize_event(e: WorldEvent) -> EventSchema:
    return EventSchema(**e.to_dict())


def player_schema(manager: EngineManager, player_id: int) -> PlayerSchema:
    snap = manager.get_snapshot()
    entry = snap.players.get(player_id)
    pos = entry.position if entry else None
    return PlayerSchema(
        player_id=player_id,
        owner=manager.characters.owner_of(player_id),
        health=manager.characters.health_of(player_id),
        x=pos.x if pos else None,
        y=pos.y if pos else None,
        in_roster=player_id in snap.roster,
        last_collect_at=entry.last_collect_at if entry else None,
        cooldown_remaining=manager.machine.cooldown_remaining(player_id),
    )


@router.get("/state", response_model=WorldStateResponse)
def get_state(
    since_tick: int | None = Query(None, ge=0, description="Only include events from this tick on"),
    event_count: int = Query(50, ge=0, le=1000),
    manager: EngineManager = Depends(get_engine_manager),
) -> WorldStateResponse:
    snap = manager.get_snapshot()
    if since_tick is not None:
        events = manager.event_log.since_tick(since_tick)
    else:
        events = manager.event_log.latest(event_count)
    return WorldStateResponse(
        tick=snap.tick,
        timestamp=snap.timestamp,
        epoch=snap.epoch,
        epoch_tick=snap.epoch_tick,
        active=snap.active,
        roster=list(snap.roster),
        players=[player_schema(manager, pid) for pid in snap.roster],
        events=[_serialize_event(e) for e in events],
    )


@router.get("/events", response_model=list[EventSchema])
def get_events(
    since_tick: int = Query(0, ge=0),
    manager: EngineManager = Depends(get_engine_manager),
) -> list[EventSchema]:
    return [_serialize_event(e) for e in manager.event_log.since_tick(since_tick)]
