"""
State serialization utilities.
"""

from dataclasses import asdict
from typing import Any, Dict, Optional

from .constants import is_ai_seat
from .models import LastEntry, Play, RoomState


def _serialize_last(entry: LastEntry) -> Optional[Any]:
    if isinstance(entry, Play):
        return entry.to_dict()
    return entry


def snapshot(state: RoomState) -> Dict[str, Any]:
    """
    Build a JSON-safe view of the whole room.

    Every hand is included; there is no per-viewer filtering.
    """
    return {
        "id": state.id,
        "version": state.version,
        "stage": state.stage,
        "seats": list(state.seats),
        "ai_seats": [is_ai_seat(occupant) for occupant in state.seats],
        "hands": [list(hand) if hand is not None else None for hand in state.hands],
        "hand_counts": [len(hand) if hand is not None else 0 for hand in state.hands],
        "board": list(state.board),
        "last_by_seat": [_serialize_last(entry) for entry in state.last_by_seat],
        "ranks": list(state.ranks),
        "turn_index": state.turn_index,
        "initial_play_pending": state.initial_play_pending,
        "lowest_dealt_card": state.lowest_dealt_card,
        "starting_players": state.starting_players,
        "discard_count": len(state.discard),
        "stats": {identity: asdict(stats) for identity, stats in state.stats.items()},
        "names": dict(state.names),
        "game_id": state.game_id,
        "game_log": list(state.game_log),
        "errored": state.errored,
    }


def get_public_room_info(state: RoomState) -> Dict[str, Any]:
    """Short summary of a room for health/listing endpoints."""
    return {
        "id": state.id,
        "stage": state.stage,
        "player_count": sum(1 for occupant in state.seats if occupant is not None),
        "errored": state.errored,
    }
