"""Game models and data structures"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

from .constants import NUM_SEATS, STAGE_SEATING


class Category(str, Enum):
    """Play categories."""
    NONE = "None"
    FREE_PLAY = "Free Play"
    SINGLES = "Singles"
    PAIR = "Pair"
    TWO_PAIR = "Two Pair"
    TRIPLE = "Three of a Kind"
    STRAIGHT = "Straight"
    FLUSH = "Flush"
    STRAIGHT_FLUSH = "Straight Flush"
    FULL_HOUSE = "Full House"
    BOMB = "Bomb"


@dataclass(frozen=True)
class Play:
    category: Category
    rank: int = 0
    name: str = ''
    size: int = 0

    @property
    def label(self) -> str:
        """Category label, with the length for straights ('5 Card Straight')."""
        if self.category == Category.STRAIGHT:
            return f"{self.size} Card Straight"
        return self.category.value

    @property
    def is_valid(self) -> bool:
        return self.category not in (Category.NONE, Category.FREE_PLAY)

    def same_shape(self, other: 'Play') -> bool:
        if self.category != other.category:
            return False
        if self.category == Category.STRAIGHT:
            return self.size == other.size
        return True

    def to_dict(self) -> Dict:
        return {
            'category': self.category.value,
            'label': self.label,
            'rank': self.rank,
            'name': self.name,
            'size': self.size,
        }


NO_PLAY = Play(Category.NONE, 0, '', 0)
INVALID_PLAY = Play(Category.NONE, 0, 'Not Valid', 0)
FREE_PLAY = Play(Category.FREE_PLAY, 0, 'Free Play', 0)

# An entry in last_by_seat: a Play, the literal 'pass', or None
LastEntry = Optional[Union[Play, str]]


@dataclass
class PlayerStats:
    points: int = 0
    player_games: int = 0
    games: int = 0
    first: int = 0
    second: int = 0
    third: int = 0
    fourth: int = 0
    bombs: int = 0

    def record_place(self, rank: int):
        place = {1: 'first', 2: 'second', 3: 'third', 4: 'fourth'}.get(rank)
        if place:
            setattr(self, place, getattr(self, place) + 1)


def _empty_seats() -> list:
    return [None] * NUM_SEATS


@dataclass
class RoomState:
    id: str
    version: int = 0
    stage: str = STAGE_SEATING  # seating|active|finished
    seats: List[Optional[str]] = field(default_factory=_empty_seats)  # identity, 'bot:<persona>#<seat>', 'disconnected' or None
    hands: List[Optional[List[str]]] = field(default_factory=_empty_seats)  # sorted high -> low
    board: List[str] = field(default_factory=list)  # sorted high -> low
    last_by_seat: List[LastEntry] = field(default_factory=_empty_seats)
    ranks: List[Optional[int]] = field(default_factory=_empty_seats)
    turn_index: int = 0
    initial_play_pending: bool = True
    lowest_dealt_card: Optional[str] = None
    starting_players: int = 0
    discard: List[str] = field(default_factory=list)  # cards played off the board
    stats: Dict[str, PlayerStats] = field(default_factory=dict)
    names: Dict[str, str] = field(default_factory=dict)
    game_id: int = 0
    game_log: List[str] = field(default_factory=list)
    errored: bool = False
    last_activity: float = field(default_factory=time.time)

    def touch(self):
        self.version += 1
        self.last_activity = time.time()
