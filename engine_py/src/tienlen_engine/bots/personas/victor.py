"""
Victor: bomb collector. Protects faces he holds three or more of, sheds
the cards outside them, and detonates when an opponent is nearly out.
"""

from typing import List

from ..analyzer import Candidate, group_by_face
from ..base import Persona, face_counts, is_any_opponent_low, is_bomb, seat_hand


def bomb_potential_faces(hand: List[str]) -> List[str]:
    return [face for face, count in face_counts(hand).items() if count >= 3]


def breaks_bomb_potential(candidate: Candidate, hand: List[str]) -> bool:
    """Uses two or more cards of a face the hand holds at least three of."""
    held = face_counts(hand)
    return any(
        held.get(face, 0) >= 3 and len(cards) >= 2
        for face, cards in group_by_face(candidate.cards).items()
    )


def orphan_cards(hand: List[str]) -> List[str]:
    return [card for cards in group_by_face(hand).values() if len(cards) < 3 for card in cards]


def should_pass(analysis, state, seat, rng):
    if analysis.is_free_play:
        return False
    if is_any_opponent_low(state, seat, 2):
        return False

    best = analysis.best
    if best is None:
        return True

    hand = seat_hand(state, seat)
    if breaks_bomb_potential(best, hand):
        return rng.random() < 0.6

    has_complete_bomb = any(is_bomb(p) for p in analysis.valid_plays)
    if has_complete_bomb and not is_any_opponent_low(state, seat, 4):
        return rng.random() < 0.4

    if not bomb_potential_faces(hand):
        return rng.random() < 0.15

    return rng.random() < 0.25


def filter_plays(plays, analysis, state, seat, rng):
    if is_any_opponent_low(state, seat, 3):
        return plays

    hand = seat_hand(state, seat)
    orphans = set(orphan_cards(hand))

    orphan_plays = [
        p for p in plays
        if not is_bomb(p) and all(card in orphans for card in p.cards)
    ]
    if orphan_plays:
        return orphan_plays

    safe = [p for p in plays if not is_bomb(p) and not breaks_bomb_potential(p, hand)]
    return safe or plays


def select_from_filtered(filtered, analysis, state, seat, rng):
    if is_any_opponent_low(state, seat, 3):
        bombs = [p for p in filtered if is_bomb(p)]
        if bombs:
            return bombs[0]
    return filtered[0]


PERSONA = Persona(
    name='victor',
    display_name='Victor',
    color='#f39c12',
    min_delay=1800,
    max_delay=3500,
    should_pass=should_pass,
    filter_plays=filter_plays,
    select_from_filtered=select_from_filtered,
)
