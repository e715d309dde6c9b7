import random
from typing import Callable, List, Optional

import pytest

from tienlen_engine.constants import NUM_SEATS, STAGE_ACTIVE
from tienlen_engine.engine import TienLenEngine
from tienlen_engine.models import RoomState
from tienlen_engine.rules import create_config
from tienlen_engine.scheduler import Scheduler


class ManualScheduler(Scheduler):
    """Queues callbacks; tests fire them explicitly."""

    def __init__(self):
        self.queue: List[tuple] = []

    def after(self, ms, fn: Callable[[], None]):
        self.queue.append((ms, fn))

    def run_next(self) -> bool:
        if not self.queue:
            return False
        _, fn = self.queue.pop(0)
        fn()
        return True

    def run_all(self, limit: int = 1000) -> int:
        runs = 0
        while self.queue and runs < limit:
            self.run_next()
            runs += 1
        return runs


class Recorder:
    def __init__(self):
        self.published = []

    def __call__(self, room_id, snapshot):
        self.published.append((room_id, snapshot))


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def engine(scheduler, recorder):
    return TienLenEngine(
        config=create_config(ai_delay_scale=0, settle_delay_ms=0),
        scheduler=scheduler,
        publisher=recorder,
        rng=random.Random(7),
    )


def make_active_room(
    hands: List[Optional[List[str]]],
    seats: Optional[List[Optional[str]]] = None,
    turn_index: int = 0,
    initial_play_pending: bool = False,
    lowest_dealt_card: Optional[str] = None
) -> RoomState:
    """Build an in-progress room with hands given by seat."""
    if seats is None:
        seats = [f"p{i}" if hand is not None else None for i, hand in enumerate(hands)]
    state = RoomState(id="room")
    state.stage = STAGE_ACTIVE
    state.seats = list(seats)
    state.hands = [list(hand) if hand is not None else None for hand in hands]
    state.turn_index = turn_index
    state.initial_play_pending = initial_play_pending
    state.lowest_dealt_card = lowest_dealt_card
    state.starting_players = sum(1 for occupant in seats if occupant is not None)
    state.ranks = [None] * NUM_SEATS
    state.last_by_seat = [None] * NUM_SEATS
    for occupant in seats:
        if occupant is not None:
            state.names.setdefault(occupant, occupant)
    return state


def install_room(engine: TienLenEngine, state: RoomState):
    """Put a hand-built room into the engine's registry."""
    handle = engine.registry.get_or_create(state.id)
    handle.state = state
    return handle
