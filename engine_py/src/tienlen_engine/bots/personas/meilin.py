"""
Mei-Lin: phase-adaptive. Hoards early, sheds singles mid-game and fights
for every board in the endgame.
"""

from ..base import (
    Persona, count_high_cards, count_twos, is_any_opponent_low, is_bomb,
    is_singles, seat_hand
)
from ..evaluator import face_value

EARLY = 'early'
MID = 'mid'
ENDGAME = 'endgame'


def game_phase(state, seat) -> str:
    if is_any_opponent_low(state, seat, 3):
        return ENDGAME
    hand_size = len(seat_hand(state, seat))
    if hand_size >= 9:
        return EARLY
    if hand_size >= 5:
        return MID
    return ENDGAME


def is_low_value_play(candidate) -> bool:
    return all(face_value(card) < 8 for card in candidate.cards)


def should_pass(analysis, state, seat, rng):
    if analysis.is_free_play:
        return False

    best = analysis.best
    if best is None:
        return True

    phase = game_phase(state, seat)
    if phase == EARLY:
        if is_bomb(best) or count_twos(best.cards) > 0:
            return True
        if not is_low_value_play(best):
            return rng.random() < 0.5
        return rng.random() < 0.35
    if phase == MID:
        if is_bomb(best):
            return rng.random() < 0.6
        if count_twos(best.cards) > 0:
            return rng.random() < 0.4
        return rng.random() < 0.2
    return False


def filter_plays(plays, analysis, state, seat, rng):
    phase = game_phase(state, seat)
    if phase == EARLY:
        low = [
            p for p in plays
            if not is_bomb(p)
            and count_twos(p.cards) == 0
            and count_high_cards(p.cards) == 0
            and is_low_value_play(p)
        ]
        return low or plays[:3]
    if phase == MID:
        mid = [p for p in plays if not is_bomb(p) and count_twos(p.cards) == 0]
        return mid or plays
    return plays


def select_from_filtered(filtered, analysis, state, seat, rng):
    phase = game_phase(state, seat)
    if phase == EARLY:
        return filtered[0]

    if phase == MID:
        singles = [p for p in filtered if is_singles(p)]
        return singles[0] if singles else filtered[0]

    multi = [p for p in filtered if len(p.cards) >= 2]
    if multi:
        return max(multi, key=lambda p: len(p.cards))

    if is_any_opponent_low(state, seat, 2):
        bombs = [p for p in filtered if is_bomb(p)]
        if bombs:
            return bombs[0]

    return filtered[0]


PERSONA = Persona(
    name='meilin',
    display_name='Mei-Lin',
    color='#e91e63',
    min_delay=1500,
    max_delay=3000,
    should_pass=should_pass,
    filter_plays=filter_plays,
    select_from_filtered=select_from_filtered,
)
