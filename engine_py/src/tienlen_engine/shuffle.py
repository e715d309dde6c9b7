"""
Card shuffling and dealing utilities.
"""

import random
from typing import List, Optional, Tuple

from .constants import CARDS_PER_HAND, CARD_RANK, create_deck, sort_cards


def shuffle_deck(deck: List[str], rng: Optional[random.Random] = None) -> List[str]:
    """
    Shuffle a deck, deterministically when a seeded rng is supplied.

    Args:
        deck: List of card IDs to shuffle
        rng: Random source; the module-level generator is used when omitted

    Returns:
        Shuffled copy of the deck
    """
    deck_copy = deck.copy()
    (rng or random).shuffle(deck_copy)
    return deck_copy


def deal_hands(
    seats: List[Optional[str]],
    rng: Optional[random.Random] = None,
    cards_per_hand: int = CARDS_PER_HAND
) -> List[Optional[List[str]]]:
    """
    Deal a fresh shuffled deck to every occupied seat.

    Args:
        seats: Seat occupants; None marks an empty seat
        rng: Random source used for the shuffle
        cards_per_hand: Cards dealt to each occupied seat

    Returns:
        Hands indexed by seat, sorted high -> low; None for empty seats
    """
    deck = shuffle_deck(create_deck(), rng)
    hands: List[Optional[List[str]]] = [None] * len(seats)

    position = 0
    for seat, occupant in enumerate(seats):
        if occupant is None:
            continue
        hands[seat] = sort_cards(deck[position:position + cards_per_hand])
        position += cards_per_hand

    return hands


def determine_first_player(hands: List[Optional[List[str]]]) -> Tuple[int, str]:
    """
    Find the seat holding the lowest dealt card.

    Args:
        hands: Hands indexed by seat

    Returns:
        Tuple of (seat index, lowest card id)

    Raises:
        ValueError: If no seat holds any card
    """
    best_seat = None
    best_card = None
    for seat, hand in enumerate(hands):
        if not hand:
            continue
        low = min(hand, key=CARD_RANK.get)
        if best_card is None or CARD_RANK[low] < CARD_RANK[best_card]:
            best_seat, best_card = seat, low

    if best_seat is None:
        raise ValueError("No cards dealt")

    return best_seat, best_card
