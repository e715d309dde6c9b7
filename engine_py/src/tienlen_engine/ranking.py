# engine_py/src/tienlen_engine/ranking.py

from typing import List, Optional, Tuple

from .constants import DISCONNECTED, NUM_SEATS, PASS
from .errors import StateInvariantViolation
from .models import Play, PlayerStats, RoomState


def is_unranked_seat(state: RoomState, seat: int) -> bool:
    """Seat is occupied (connected or not) and has not finished."""
    return state.seats[seat] is not None and state.ranks[seat] is None


def is_active_seat(state: RoomState, seat: int) -> bool:
    """Seat can still take turns: occupied, connected and unranked."""
    return is_unranked_seat(state, seat) and state.seats[seat] != DISCONNECTED


def _available_ranks(state: RoomState) -> List[int]:
    taken = {rank for rank in state.ranks if rank is not None}
    return [rank for rank in range(1, state.starting_players + 1) if rank not in taken]


def find_lowest_available_rank(state: RoomState) -> int:
    """Best unused place, or 0 when every place is taken."""
    available = _available_ranks(state)
    return available[0] if available else 0


def find_highest_available_rank(state: RoomState) -> int:
    """Worst unused place, or 0 when every place is taken."""
    available = _available_ranks(state)
    return available[-1] if available else 0


def assign_game_points(state: RoomState, rank: int) -> int:
    return state.starting_players - rank + 1


def assign_rank_to_seat(state: RoomState, seat: int, rank: int):
    """
    Give a seat its finishing place and credit the occupant's stats.

    Disconnected placeholders get the rank but no stats, since nobody
    is behind them any more.
    """
    state.ranks[seat] = rank

    occupant = state.seats[seat]
    if occupant is None or occupant == DISCONNECTED:
        return

    stats = state.stats.setdefault(occupant, PlayerStats())
    stats.games += 1
    stats.record_place(rank)
    stats.points += assign_game_points(state, rank)
    stats.player_games += state.starting_players


def count_remaining_players(state: RoomState) -> int:
    """Occupied seats without a rank, disconnected ones included."""
    return sum(1 for seat in range(NUM_SEATS) if is_unranked_seat(state, seat))


def find_orphaned_seat(state: RoomState) -> Tuple[int, Optional[int]]:
    """
    Count unranked seats and return the last one found.

    A count of exactly one means that seat has nobody left to play against.
    """
    count = 0
    orphan = None
    for seat in range(NUM_SEATS):
        if is_unranked_seat(state, seat):
            count += 1
            orphan = seat
    return count, orphan


def find_next_turn(state: RoomState, from_seat: Optional[int] = None) -> int:
    """
    Next seat after from_seat (default: the current turn) that can act.

    Searches forward up to four positions, wrapping, so the starting seat
    itself is the last candidate.

    Raises:
        StateInvariantViolation: If no seat can act
    """
    start = state.turn_index if from_seat is None else from_seat
    for offset in range(1, NUM_SEATS + 1):
        seat = (start + offset) % NUM_SEATS
        if is_active_seat(state, seat):
            return seat
    raise StateInvariantViolation(
        f"No eligible next player in room {state.id} (seats={state.seats}, ranks={state.ranks})"
    )


def find_board_holder(state: RoomState) -> Optional[int]:
    """Seat whose play is currently on the board, if any."""
    for seat, entry in enumerate(state.last_by_seat):
        if isinstance(entry, Play):
            return seat
    return None


def should_clear_board(state: RoomState) -> bool:
    """
    True when every active seat other than the board holder has passed.

    The holder may already have finished. Disconnected seats are ignored.
    """
    holder = find_board_holder(state)
    if holder is None:
        return False

    others = [
        seat for seat in range(NUM_SEATS)
        if seat != holder and is_active_seat(state, seat)
    ]
    if not others:
        return False
    return all(state.last_by_seat[seat] == PASS for seat in others)


def clear_board(state: RoomState):
    """Move the board to the discard pile and start a free play."""
    state.discard.extend(state.board)
    state.board = []
    state.last_by_seat = [None] * NUM_SEATS
