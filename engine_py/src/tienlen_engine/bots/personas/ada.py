"""
Professor Ada: deterministic optimizer. Weighs cards shed against value
spent and never rolls dice.
"""

from typing import List

from ..analyzer import Candidate
from ..base import (
    Persona, average_face_value, count_twos, face_counts, is_any_opponent_low,
    is_bomb, seat_hand
)


def efficiency(candidate: Candidate) -> float:
    """Cards shed per unit of average face value."""
    return len(candidate.cards) / average_face_value(candidate)


def has_guaranteed_sequence(hand: List[str]) -> bool:
    if hand and len(hand) <= 3 and all(card[0] == '2' for card in hand):
        return True
    if len(hand) <= 5 and any(count == 4 for count in face_counts(hand).values()):
        return True
    return False


def should_pass(analysis, state, seat, rng):
    if analysis.is_free_play:
        return False

    hand = seat_hand(state, seat)
    if has_guaranteed_sequence(hand):
        return False
    if is_any_opponent_low(state, seat, 2):
        return False

    best = analysis.best
    if best is None:
        return True

    board_value = analysis.last_play.rank if analysis.last_play is not None else 0
    play_value = average_face_value(best)

    if play_value > 15 and board_value < 8:
        return True

    if len(hand) > 8 and not is_any_opponent_low(state, seat, 5):
        if count_twos(best.cards) > 0:
            return True
        if efficiency(best) < 0.3:
            return True

    return len(hand) / 13 > 0.5 and play_value > 10


def filter_plays(plays, analysis, state, seat, rng):
    if is_any_opponent_low(state, seat, 3):
        return plays

    efficient = [p for p in plays if efficiency(p) >= 0.15]
    non_bomb = [p for p in efficient if not is_bomb(p)]
    board_rank = analysis.last_play.rank if analysis.last_play is not None else 0
    keep_twos = [p for p in non_bomb if count_twos(p.cards) == 0 or board_rank >= 12]

    return keep_twos or non_bomb or efficient or plays


def composite_score(candidate: Candidate) -> float:
    score = len(candidate.cards) * 10
    score += efficiency(candidate) * 20
    score -= candidate.score * 0.5
    score -= count_twos(candidate.cards) * 15
    if is_bomb(candidate):
        score -= 30
    return score


def select_from_filtered(filtered, analysis, state, seat, rng):
    best, best_score = filtered[0], float('-inf')
    for candidate in filtered:
        score = composite_score(candidate)
        if score > best_score:
            best, best_score = candidate, score
    return best


PERSONA = Persona(
    name='ada',
    display_name='Professor Ada',
    color='#34495e',
    min_delay=2500,
    max_delay=4500,
    should_pass=should_pass,
    filter_plays=filter_plays,
    select_from_filtered=select_from_filtered,
)
