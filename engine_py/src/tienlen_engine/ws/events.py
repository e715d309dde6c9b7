"""
WebSocket event models and validation.
"""

import time
from enum import Enum
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..constants import CARD_RANK, STAGES


class EventType(str, Enum):
    """Inbound event types."""
    JOIN = "join"
    CHOOSE_SEAT = "choose_seat"
    ADD_AI = "add_ai"
    REMOVE_SEAT = "remove_seat"
    SET_STAGE = "set_stage"
    PLAY = "play"
    PASS = "pass"
    FORFEIT = "forfeit"
    REQUEST_STATE = "request_state"


class OutboundEventType(str, Enum):
    """Outbound event types."""
    STATE = "state"
    ERROR = "error"


INVALID_EVENT = "INVALID_EVENT"


# Inbound event models
class BaseEvent(BaseModel):
    """Base event model."""
    type: EventType


class JoinEvent(BaseEvent):
    """Join room event; the room and identity come from the socket path."""
    type: EventType = EventType.JOIN
    name: str = Field(..., min_length=1, max_length=30)


class ChooseSeatEvent(BaseEvent):
    """Sit down, move, or stand up."""
    type: EventType = EventType.CHOOSE_SEAT
    seat: int = Field(..., ge=0, le=3)


class AddAiEvent(BaseEvent):
    """Seat an AI opponent."""
    type: EventType = EventType.ADD_AI
    persona: str = Field(..., min_length=1, max_length=30)
    seat: int = Field(..., ge=0, le=3)


class RemoveSeatEvent(BaseEvent):
    """Vacate a seat (e.g. remove an AI)."""
    type: EventType = EventType.REMOVE_SEAT
    seat: int = Field(..., ge=0, le=3)


class SetStageEvent(BaseEvent):
    """Start a game or return to seating."""
    type: EventType = EventType.SET_STAGE
    stage: str

    @field_validator('stage')
    @classmethod
    def validate_stage(cls, v):
        if v not in STAGES:
            raise ValueError(f'Unknown stage: {v}')
        return v


class PlayEvent(BaseEvent):
    """Play cards event."""
    type: EventType = EventType.PLAY
    cards: List[str] = Field(..., min_length=1, max_length=13)

    @field_validator('cards')
    @classmethod
    def validate_cards(cls, v):
        unknown = [card for card in v if card not in CARD_RANK]
        if unknown:
            raise ValueError(f'Unknown cards: {unknown}')
        return v


class PassEvent(BaseEvent):
    """Pass turn event."""
    type: EventType = EventType.PASS


class ForfeitEvent(BaseEvent):
    """Give up the current game."""
    type: EventType = EventType.FORFEIT


class RequestStateEvent(BaseEvent):
    """Request full state event."""
    type: EventType = EventType.REQUEST_STATE


# Union type for all inbound events
InboundEvent = Union[
    JoinEvent,
    ChooseSeatEvent,
    AddAiEvent,
    RemoveSeatEvent,
    SetStageEvent,
    PlayEvent,
    PassEvent,
    ForfeitEvent,
    RequestStateEvent,
]

EVENT_MAP = {
    EventType.JOIN: JoinEvent,
    EventType.CHOOSE_SEAT: ChooseSeatEvent,
    EventType.ADD_AI: AddAiEvent,
    EventType.REMOVE_SEAT: RemoveSeatEvent,
    EventType.SET_STAGE: SetStageEvent,
    EventType.PLAY: PlayEvent,
    EventType.PASS: PassEvent,
    EventType.FORFEIT: ForfeitEvent,
    EventType.REQUEST_STATE: RequestStateEvent,
}


# Outbound event models
class StateEvent(BaseModel):
    """Full room snapshot."""
    type: OutboundEventType = OutboundEventType.STATE
    state: Dict[str, Any]
    timestamp: float


class ErrorEvent(BaseModel):
    """Error sent to the client whose action failed."""
    type: OutboundEventType = OutboundEventType.ERROR
    code: str
    message: str
    timestamp: float


def parse_inbound_event(data: Dict[str, Any]) -> InboundEvent:
    """
    Parse raw event data into appropriate event model.

    Args:
        data: Raw event data from WebSocket

    Returns:
        Parsed event model

    Raises:
        ValueError: If event type is invalid or data is malformed
    """
    if not isinstance(data, dict):
        raise ValueError("Event must be a JSON object")

    event_type = data.get("type")
    if not event_type:
        raise ValueError("Missing event type")

    try:
        event_type = EventType(event_type)
    except ValueError:
        raise ValueError(f"Invalid event type: {event_type}")

    try:
        return EVENT_MAP[event_type](**data)
    except ValidationError as e:
        raise ValueError(f"Invalid event data: {e}")


def create_error_event(code: str, message: str) -> ErrorEvent:
    """Create an error event."""
    return ErrorEvent(code=code, message=message, timestamp=time.time())


def create_state_event(state: Dict[str, Any]) -> StateEvent:
    """Create a full state event."""
    return StateEvent(state=state, timestamp=time.time())
