"""
Base persona interface and shared bot heuristics.

A persona is a plain record of three decision hooks plus its think-time
range. choose_play runs the common pipeline over a HandAnalysis:

    no legal plays          -> pass
    not free play and pass  -> pass
    filter_plays            -> select_from_filtered
    filter removed all      -> cheapest legal play
"""

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from ..constants import NUM_SEATS
from ..models import Category, RoomState
from ..ranking import is_unranked_seat
from .analyzer import Candidate, HandAnalysis, group_by_face
from .evaluator import face_value, is_high_card, is_two

ShouldPass = Callable[[HandAnalysis, RoomState, int, random.Random], bool]
FilterPlays = Callable[[List[Candidate], HandAnalysis, RoomState, int, random.Random], List[Candidate]]
SelectPlay = Callable[[List[Candidate], HandAnalysis, RoomState, int, random.Random], Candidate]

LOW_FACES = {'3', '4', '5', '6', '7', '8', '9'}


def never_pass(analysis: HandAnalysis, state: RoomState, seat: int, rng: random.Random) -> bool:
    return False


def keep_all(plays: List[Candidate], analysis: HandAnalysis, state: RoomState,
             seat: int, rng: random.Random) -> List[Candidate]:
    return plays


def cheapest(filtered: List[Candidate], analysis: HandAnalysis, state: RoomState,
             seat: int, rng: random.Random) -> Candidate:
    return filtered[0]


@dataclass(frozen=True)
class Persona:
    name: str
    display_name: str
    color: str
    min_delay: int
    max_delay: int
    should_pass: ShouldPass = never_pass
    filter_plays: FilterPlays = keep_all
    select_from_filtered: SelectPlay = cheapest


def choose_play(
    persona: Persona,
    analysis: HandAnalysis,
    state: RoomState,
    seat: int,
    rng: random.Random
) -> Optional[Candidate]:
    """
    Pick a play for a bot, or None to pass.

    Args:
        persona: Decision hooks to apply
        analysis: Legal plays for the seat, cheapest first
        state: Current room state
        seat: Seat index of the bot
        rng: Random source for the persona's rolls

    Returns:
        The chosen Candidate, or None to pass
    """
    if not analysis.valid_plays:
        return None

    if not analysis.is_free_play and persona.should_pass(analysis, state, seat, rng):
        return None

    filtered = persona.filter_plays(analysis.valid_plays, analysis, state, seat, rng)
    if not filtered:
        return analysis.valid_plays[0]

    return persona.select_from_filtered(filtered, analysis, state, seat, rng)


# Shared heuristics

def opponent_card_counts(state: RoomState, seat: int) -> Dict[int, int]:
    """Cards left per opponent seat that is still in the game."""
    counts = {}
    for other in range(NUM_SEATS):
        if other == seat or not is_unranked_seat(state, other):
            continue
        hand = state.hands[other]
        counts[other] = len(hand) if hand else 0
    return counts


def is_any_opponent_low(state: RoomState, seat: int, threshold: int = 3) -> bool:
    """Some opponent has between 1 and threshold cards left."""
    return any(0 < count <= threshold for count in opponent_card_counts(state, seat).values())


def next_active_seat(state: RoomState, seat: int) -> Optional[int]:
    """Next seat after this one that is occupied and unranked."""
    for offset in range(1, NUM_SEATS + 1):
        other = (seat + offset) % NUM_SEATS
        if is_unranked_seat(state, other):
            return other
    return None


def count_twos(cards: List[str]) -> int:
    return sum(1 for card in cards if is_two(card))


def count_high_cards(cards: List[str]) -> int:
    return sum(1 for card in cards if is_high_card(card))


def is_bomb(candidate: Candidate) -> bool:
    return candidate.play.category == Category.BOMB


def is_straight(candidate: Candidate) -> bool:
    return candidate.play.category == Category.STRAIGHT


def is_straight_flush(candidate: Candidate) -> bool:
    return candidate.play.category == Category.STRAIGHT_FLUSH


def is_singles(candidate: Candidate) -> bool:
    return candidate.play.category == Category.SINGLES


def is_low_card_play(candidate: Candidate) -> bool:
    """Only faces 3 through 9."""
    return all(card[0] in LOW_FACES for card in candidate.cards)


def average_face_value(candidate: Candidate) -> float:
    return sum(face_value(card) for card in candidate.cards) / len(candidate.cards)


def seat_hand(state: RoomState, seat: int) -> List[str]:
    return state.hands[seat] or []


def face_counts(hand: List[str]) -> Dict[str, int]:
    return {face: len(cards) for face, cards in group_by_face(hand).items()}
