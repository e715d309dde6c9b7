"""
Sophie: straight specialist. Leads with runs and avoids breaking the
faces that could still form one.
"""

from typing import List, Set

from ..analyzer import group_by_face
from ..base import (
    Persona, is_any_opponent_low, is_singles, is_straight, is_straight_flush, seat_hand
)
from ...constants import FACE_RANK


def sequence_cards(hand: List[str]) -> Set[str]:
    """Cards whose face sits in a run of three or more consecutive faces (2s excluded)."""
    by_face = group_by_face(hand)
    faces = sorted((face for face in by_face if face != '2'), key=FACE_RANK.get)

    result = set()
    run = []
    for face in faces:
        if run and FACE_RANK[face] != FACE_RANK[run[-1]] + 1:
            if len(run) >= 3:
                result.update(card for f in run for card in by_face[f])
            run = []
        run.append(face)
    if len(run) >= 3:
        result.update(card for f in run for card in by_face[f])
    return result


def orphan_cards(hand: List[str]) -> Set[str]:
    return set(hand) - sequence_cards(hand)


def should_pass(analysis, state, seat, rng):
    if analysis.is_free_play:
        return False
    if is_any_opponent_low(state, seat, 3):
        return False

    best = analysis.best
    if best is None:
        return True
    if is_straight(best) and len(best.cards) >= 4:
        return False
    if is_straight_flush(best):
        return False

    in_sequence = sequence_cards(seat_hand(state, seat))
    if len(in_sequence) >= 3:
        if any(card in in_sequence for card in best.cards) and not is_straight(best):
            return rng.random() < 0.55

    return rng.random() < 0.2


def filter_plays(plays, analysis, state, seat, rng):
    if is_any_opponent_low(state, seat, 3):
        return plays

    runs = [p for p in plays if is_straight(p) or is_straight_flush(p)]
    if runs:
        return runs

    hand = seat_hand(state, seat)
    orphans = orphan_cards(hand)
    orphan_plays = [p for p in plays if all(card in orphans for card in p.cards)]
    if orphan_plays:
        return orphan_plays

    in_sequence = sequence_cards(hand)
    outside = [p for p in plays if not any(card in in_sequence for card in p.cards)]
    return outside or plays


def _longest_then_cheapest(plays):
    return sorted(plays, key=lambda p: (-len(p.cards), p.score))[0]


def select_from_filtered(filtered, analysis, state, seat, rng):
    straight_flushes = [p for p in filtered if is_straight_flush(p)]
    if straight_flushes:
        return _longest_then_cheapest(straight_flushes)

    straights = [p for p in filtered if is_straight(p)]
    if straights:
        return _longest_then_cheapest(straights)

    singles = [p for p in filtered if is_singles(p)]
    if singles:
        return singles[0]

    return filtered[0]


PERSONA = Persona(
    name='sophie',
    display_name='Sophie',
    color='#2ecc71',
    min_delay=1200,
    max_delay=2500,
    should_pass=should_pass,
    filter_plays=filter_plays,
    select_from_filtered=select_from_filtered,
)
