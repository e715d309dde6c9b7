"""
Grandma Liu: conservative. Passes a lot, prefers singles and pairs and
only gives up a bomb when an opponent is about to win.
"""

from ..base import (
    Persona, count_twos, is_any_opponent_low, is_bomb, is_low_card_play, is_singles
)
from ...models import Category


def should_pass(analysis, state, seat, rng):
    if analysis.is_free_play:
        return False
    if is_any_opponent_low(state, seat, 2):
        return False

    best = analysis.best
    if best is None:
        return True
    if is_bomb(best):
        return True
    if count_twos(best.cards) > 0:
        return rng.random() < 0.7
    if any(card[0] == 'A' for card in best.cards):
        return rng.random() < 0.5
    return rng.random() < 0.25


def filter_plays(plays, analysis, state, seat, rng):
    if is_any_opponent_low(state, seat, 2):
        return plays

    preferred = [
        p for p in plays
        if not is_bomb(p) and (len(p.cards) <= 2 or is_low_card_play(p))
    ]
    return preferred or plays


def select_from_filtered(filtered, analysis, state, seat, rng):
    singles = [p for p in filtered if is_singles(p)]
    if singles:
        return singles[0]

    pairs = [p for p in filtered if p.play.category == Category.PAIR]
    if pairs:
        return pairs[0]

    return filtered[0]


PERSONA = Persona(
    name='grandmaliu',
    display_name='Grandma Liu',
    color='#9b59b6',
    min_delay=2000,
    max_delay=4000,
    should_pass=should_pass,
    filter_plays=filter_plays,
    select_from_filtered=select_from_filtered,
)
