"""
Marcus: balanced. Plays the cheapest card that beats the board and keeps
bombs and 2s back until someone is close to going out.
"""

from ..base import Persona, count_twos, is_any_opponent_low, is_bomb


def should_pass(analysis, state, seat, rng):
    if analysis.is_free_play:
        return False
    if is_any_opponent_low(state, seat, 3):
        return False

    best = analysis.best
    if best is not None:
        if count_twos(best.cards) > 0:
            return rng.random() < 0.3
        if is_bomb(best):
            return rng.random() < 0.4

    return rng.random() < 0.1


def filter_plays(plays, analysis, state, seat, rng):
    if is_any_opponent_low(state, seat, 3):
        return plays

    conservative = [p for p in plays if not is_bomb(p) and count_twos(p.cards) == 0]
    return conservative or plays


PERSONA = Persona(
    name='marcus',
    display_name='Marcus',
    color='#3498db',
    min_delay=1500,
    max_delay=3000,
    should_pass=should_pass,
    filter_plays=filter_plays,
)
