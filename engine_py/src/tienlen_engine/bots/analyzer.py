"""
Candidate play generation for bots.

Enumerates every combination a hand can form, keeps the ones that are
legal against the current board and orders them cheapest first.
"""

from dataclasses import dataclass, field
from itertools import combinations, product
from typing import Dict, Iterable, Iterator, List, Optional

from ..classifier import MAX_PLAY_SIZE, classify
from ..constants import FACE_RANK, NUM_SEATS
from ..models import Category, Play, RoomState
from ..validate import get_last_play, play_beats_board
from .evaluator import evaluate_play


@dataclass
class Candidate:
    cards: List[str]
    play: Play
    score: float = 0.0

    @property
    def size(self) -> int:
        return len(self.cards)


@dataclass
class HandAnalysis:
    valid_plays: List[Candidate] = field(default_factory=list)
    is_free_play: bool = True
    must_include_lowest: bool = False
    last_play: Optional[Play] = None
    hand_size: int = 0

    @property
    def best(self) -> Optional[Candidate]:
        """Cheapest legal play."""
        return self.valid_plays[0] if self.valid_plays else None


def group_by_face(hand: Iterable[str]) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {}
    for card in hand:
        groups.setdefault(card[0], []).append(card)
    return groups


def group_by_suit(hand: Iterable[str]) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {}
    for card in hand:
        groups.setdefault(card[1], []).append(card)
    return groups


def _keep(cards: List[str], *categories: Category) -> Optional[Candidate]:
    play = classify(cards)
    if play.category in categories:
        return Candidate(cards=cards, play=play)
    return None


def _face_runs(faces: List[str], length: int) -> Iterator[List[str]]:
    """Windows of `length` consecutive faces, ascending."""
    ordered = sorted(faces, key=FACE_RANK.get)
    for start in range(len(ordered) - length + 1):
        window = ordered[start:start + length]
        if all(FACE_RANK[b] == FACE_RANK[a] + 1 for a, b in zip(window, window[1:])):
            yield window


def generate_singles(hand: List[str]) -> Iterator[Candidate]:
    for card in hand:
        yield Candidate(cards=[card], play=classify([card]))


def generate_sets(hand: List[str], size: int, category: Category) -> Iterator[Candidate]:
    """Pairs, triples or quads within each face."""
    for cards in group_by_face(hand).values():
        if len(cards) < size:
            continue
        for combo in combinations(cards, size):
            candidate = _keep(list(combo), category)
            if candidate:
                yield candidate


def generate_two_pairs(hand: List[str]) -> Iterator[Candidate]:
    pair_groups = [cards for cards in group_by_face(hand).values() if len(cards) >= 2]
    for first, second in combinations(pair_groups, 2):
        for low_pair, high_pair in product(combinations(first, 2), combinations(second, 2)):
            candidate = _keep(list(low_pair + high_pair), Category.TWO_PAIR)
            if candidate:
                yield candidate


def generate_straights(hand: List[str], length: int) -> Iterator[Candidate]:
    """Straights over consecutive faces; 2s never take part."""
    by_face = group_by_face(hand)
    faces = [face for face in by_face if face != '2']
    for run in _face_runs(faces, length):
        for combo in product(*(by_face[face] for face in run)):
            candidate = _keep(list(combo), Category.STRAIGHT)
            if candidate:
                yield candidate


def generate_consecutive_pairs(hand: List[str]) -> Iterator[Candidate]:
    """Runs of three or more consecutive pairs; only exact three-pair runs classify as a bomb."""
    by_face = group_by_face(hand)
    faces = [face for face, cards in by_face.items() if len(cards) >= 2 and face != '2']
    for pairs in range(3, len(faces) + 1):
        for run in _face_runs(faces, pairs):
            options = [list(combinations(by_face[face], 2)) for face in run]
            for choice in product(*options):
                cards = [card for pair in choice for card in pair]
                candidate = _keep(cards, Category.BOMB)
                if candidate:
                    yield candidate


def generate_flushes(hand: List[str]) -> Iterator[Candidate]:
    for cards in group_by_suit(hand).values():
        if len(cards) < 5:
            continue
        for combo in combinations(cards, 5):
            candidate = _keep(list(combo), Category.FLUSH, Category.STRAIGHT_FLUSH)
            if candidate:
                yield candidate


def generate_full_houses(hand: List[str]) -> Iterator[Candidate]:
    by_face = group_by_face(hand)
    for triple_face, triple_cards in by_face.items():
        if len(triple_cards) < 3:
            continue
        for pair_face, pair_cards in by_face.items():
            if pair_face == triple_face or len(pair_cards) < 2:
                continue
            for triple, pair in product(combinations(triple_cards, 3), combinations(pair_cards, 2)):
                candidate = _keep(list(triple + pair), Category.FULL_HOUSE)
                if candidate:
                    yield candidate


def generate_all_plays(hand: List[str]) -> List[Candidate]:
    plays: List[Candidate] = []
    plays.extend(generate_singles(hand))
    plays.extend(generate_sets(hand, 2, Category.PAIR))
    plays.extend(generate_sets(hand, 3, Category.TRIPLE))
    plays.extend(generate_sets(hand, 4, Category.BOMB))
    plays.extend(generate_two_pairs(hand))
    for length in range(3, min(MAX_PLAY_SIZE, len(hand)) + 1):
        plays.extend(generate_straights(hand, length))
    plays.extend(generate_consecutive_pairs(hand))
    plays.extend(generate_flushes(hand))
    plays.extend(generate_full_houses(hand))
    return plays


def analyze_hand(hand: List[str], state: RoomState, seat: int) -> HandAnalysis:
    """
    Find every legal play for a seat.

    Args:
        hand: The seat's cards
        state: Current room state
        seat: Seat index being analysed

    Returns:
        HandAnalysis with legal candidates sorted by cost, cheapest first
    """
    last_play = get_last_play(state, seat % NUM_SEATS)
    is_free_play = last_play.category == Category.FREE_PLAY
    must_include_lowest = state.initial_play_pending

    valid = []
    for candidate in generate_all_plays(hand):
        if must_include_lowest and state.lowest_dealt_card not in candidate.cards:
            continue
        if is_free_play:
            if not candidate.play.is_valid:
                continue
        elif not play_beats_board(candidate.play, last_play):
            continue
        candidate.score = evaluate_play(candidate.cards, candidate.play)
        valid.append(candidate)

    valid.sort(key=lambda candidate: candidate.score)

    return HandAnalysis(
        valid_plays=valid,
        is_free_play=is_free_play,
        must_include_lowest=must_include_lowest,
        last_play=last_play,
        hand_size=len(hand),
    )
