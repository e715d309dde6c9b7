"""
Uncle Frank: psychological. Trap-passes on a strong hand, occasionally
overplays, and picks from the candidate list by a dice roll.
"""

from ..base import (
    Persona, count_twos, is_any_opponent_low, is_bomb, next_active_seat,
    opponent_card_counts, seat_hand
)


def has_strong_hand(analysis, hand):
    return any(is_bomb(p) for p in analysis.valid_plays) or count_twos(hand) >= 2


def should_pass(analysis, state, seat, rng):
    if analysis.is_free_play:
        return False
    if is_any_opponent_low(state, seat, 2):
        return False

    best = analysis.best
    if best is None:
        return True

    if has_strong_hand(analysis, seat_hand(state, seat)):
        if analysis.last_play is not None and analysis.last_play.rank < 10:
            return rng.random() < 0.45

    if is_bomb(best) or count_twos(best.cards) > 0:
        return rng.random() < 0.5

    # never hand a free play to a player who is nearly out
    nxt = next_active_seat(state, seat)
    if nxt is not None:
        count = opponent_card_counts(state, seat).get(nxt)
        if count is not None and count <= 3:
            return False

    if rng.random() < 0.1:
        return True

    return rng.random() < 0.15


def filter_plays(plays, analysis, state, seat, rng):
    if is_any_opponent_low(state, seat, 3):
        return plays

    if rng.random() < 0.1 and len(plays) > 3:
        return plays[len(plays) // 2:]

    without_twos = [p for p in plays if count_twos(p.cards) == 0]
    return without_twos or plays


def select_from_filtered(filtered, analysis, state, seat, rng):
    roll = rng.random()
    if roll < 0.6:
        return filtered[0]
    if roll < 0.85:
        return filtered[min(len(filtered) // 2, len(filtered) - 1)]
    return filtered[-1]


PERSONA = Persona(
    name='frank',
    display_name='Uncle Frank',
    color='#1abc9c',
    min_delay=1000,
    max_delay=4000,
    should_pass=should_pass,
    filter_plays=filter_plays,
    select_from_filtered=select_from_filtered,
)
