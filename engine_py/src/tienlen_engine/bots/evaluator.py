"""
Cost scoring for candidate plays.

Lower cost means the play is cheaper to give up; high cards, 2s and bombs
cost more so bots hold on to them.
"""

from typing import Dict, List, Optional

from ..models import Category, Play

FACE_VALUES: Dict[str, int] = {
    '3': 1, '4': 2, '5': 3, '6': 4, '7': 5, '8': 6, '9': 7,
    'T': 8, 'J': 9, 'Q': 10, 'K': 11, 'A': 12,
    '2': 20,
}

SUIT_BONUS: Dict[str, float] = {'c': 0.0, 'd': 0.25, 'h': 0.5, 's': 0.75}

CATEGORY_MULTIPLIERS: Dict[Category, float] = {
    Category.SINGLES: 1.0,
    Category.PAIR: 1.2,
    Category.TWO_PAIR: 1.3,
    Category.TRIPLE: 1.5,
    Category.FLUSH: 1.6,
    Category.FULL_HOUSE: 1.8,
    Category.STRAIGHT_FLUSH: 2.5,
    Category.BOMB: 3.0,
}

LOW_VALUE_THRESHOLD = 5
LOW_VALUE_DISCOUNT = 0.8
TWO_PENALTY = 15


def face_value(card_id: str) -> int:
    return FACE_VALUES[card_id[0]]


def score_card(card_id: str) -> float:
    """Face value plus a suit tiebreak (roughly 1 to 20.75)."""
    return FACE_VALUES[card_id[0]] + SUIT_BONUS[card_id[1]]


def is_high_card(card_id: str) -> bool:
    """Aces and 2s."""
    return face_value(card_id) >= FACE_VALUES['A']


def is_two(card_id: str) -> bool:
    return card_id[0] == '2'


def category_multiplier(play: Play) -> float:
    if play.category == Category.STRAIGHT:
        # 3 cards -> 1.2 up to 13 cards -> 2.2
        return round(1.2 + 0.1 * (play.size - 3), 2)
    return CATEGORY_MULTIPLIERS.get(play.category, 1.0)


def evaluate_play(cards: List[str], play: Optional[Play]) -> float:
    """
    Cost of making a play.

    Args:
        cards: Card ids in the play
        play: Classification of the cards

    Returns:
        Cost; infinity for an invalid play
    """
    if play is None or not play.is_valid or not cards:
        return float('inf')

    base = sum(score_card(card) for card in cards)
    cost = base * category_multiplier(play)

    if base / len(cards) < LOW_VALUE_THRESHOLD:
        cost *= LOW_VALUE_DISCOUNT

    cost += TWO_PENALTY * sum(1 for card in cards if is_two(card))
    return cost
