"""
Eddie: aggressive. Never passes and sheds as many cards per play as he can.
"""

from ..base import Persona


def select_from_filtered(filtered, analysis, state, seat, rng):
    largest = max(len(p.cards) for p in filtered)
    if largest >= 2:
        # filtered is cost-ordered, so the first of the size is the cheapest
        return next(p for p in filtered if len(p.cards) == largest)
    return filtered[0]


PERSONA = Persona(
    name='eddie',
    display_name='Eddie',
    color='#e74c3c',
    min_delay=500,
    max_delay=1500,
    select_from_filtered=select_from_filtered,
)
