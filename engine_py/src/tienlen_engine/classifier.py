"""
Card combination classifier.

Maps a set of card ids to a play category and a rank. Dispatch is by the
number of cards: every size has an ordered list of matchers and the first
one that recognises the cards wins, so precedence (e.g. a four-card bomb
before a four-card straight before two pair) is explicit in RULES_BY_SIZE.
"""

from collections import Counter
from typing import Callable, Dict, List, Optional

from .constants import (
    CARD_RANK, FACE_RANK, PAIRS_BOMB_OFFSET, QUAD_BOMB_OFFSET,
    STRAIGHT_FLUSH_OFFSET, sort_cards
)
from .models import INVALID_PLAY, NO_PLAY, Category, Play

MAX_PLAY_SIZE = 13

Matcher = Callable[[List[str]], Optional[Play]]


def is_consecutive(cards: List[str]) -> bool:
    """
    Check that the faces of the cards form an unbroken run.

    Cards are sorted internally. Face order runs 3 .. A, 2 with no wraparound,
    so a run may end in a 2 (Q K A 2) but can never continue past it.
    """
    last = None
    for card in sort_cards(cards):
        current = FACE_RANK[card[0]]
        if last is not None and current != last - 1:
            return False
        last = current
    return True


def _face_counts(cards: List[str]) -> List[int]:
    return sorted(Counter(card[0] for card in cards).values())


def _top(cards: List[str]) -> int:
    return CARD_RANK[cards[0]]


def _match_single(cards: List[str]) -> Optional[Play]:
    return Play(Category.SINGLES, _top(cards), f"Singles, {cards[0]}", 1)


def _match_pair(cards: List[str]) -> Optional[Play]:
    if _face_counts(cards) == [2]:
        return Play(Category.PAIR, _top(cards), f"Pair of {cards[0][0]}'s, {cards[0]} high", 2)
    return None


def _match_triple(cards: List[str]) -> Optional[Play]:
    if _face_counts(cards) == [3]:
        return Play(Category.TRIPLE, _top(cards), f"Three of a Kind; {cards[0][0]}'s", 3)
    return None


def _match_straight(cards: List[str]) -> Optional[Play]:
    if is_consecutive(cards):
        n = len(cards)
        return Play(Category.STRAIGHT, _top(cards), f"{n} Card Straight, {cards[0]} high", n)
    return None


def _match_quad_bomb(cards: List[str]) -> Optional[Play]:
    if _face_counts(cards) == [4]:
        return Play(
            Category.BOMB,
            QUAD_BOMB_OFFSET + _top(cards),
            f"Bomb! Four of a Kind; {cards[0][0]}'s",
            4,
        )
    return None


def _match_two_pair(cards: List[str]) -> Optional[Play]:
    if _face_counts(cards) == [2, 2]:
        return Play(Category.TWO_PAIR, _top(cards), f"Two Pair, {cards[0]} high", 4)
    return None


def _is_flush(cards: List[str]) -> bool:
    return len({card[1] for card in cards}) == 1


def _match_straight_flush(cards: List[str]) -> Optional[Play]:
    if _is_flush(cards) and is_consecutive(cards):
        return Play(
            Category.STRAIGHT_FLUSH,
            STRAIGHT_FLUSH_OFFSET + _top(cards),
            f"Straight Flush, {cards[0]} high",
            len(cards),
        )
    return None


def _match_flush(cards: List[str]) -> Optional[Play]:
    if _is_flush(cards):
        return Play(Category.FLUSH, _top(cards), f"Flush, {cards[0]} high", len(cards))
    return None


def _match_full_house(cards: List[str]) -> Optional[Play]:
    counts = Counter(card[0] for card in cards)
    if sorted(counts.values()) != [2, 3]:
        return None
    triple_face = next(face for face, count in counts.items() if count == 3)
    # cards are sorted high -> low, so the first card of the triple's face is its highest
    high_card = next(card for card in cards if card[0] == triple_face)
    return Play(Category.FULL_HOUSE, CARD_RANK[high_card], f"Full House of {triple_face}s", 5)


def _match_consecutive_pairs_bomb(cards: List[str]) -> Optional[Play]:
    if _face_counts(cards) != [2, 2, 2]:
        return None
    # one card from each pair, by position in the sorted hand
    if not is_consecutive([cards[1], cards[3], cards[5]]):
        return None
    return Play(
        Category.BOMB,
        PAIRS_BOMB_OFFSET + _top(cards),
        f"Bomb! 3 Consecutive Pairs, {cards[0]} high",
        6,
    )


RULES_BY_SIZE: Dict[int, List[Matcher]] = {
    1: [_match_single],
    2: [_match_pair],
    3: [_match_triple, _match_straight],
    4: [_match_quad_bomb, _match_straight, _match_two_pair],
    5: [_match_straight_flush, _match_flush, _match_straight, _match_full_house],
    6: [_match_straight, _match_consecutive_pairs_bomb],
}
for _size in range(7, MAX_PLAY_SIZE + 1):
    RULES_BY_SIZE[_size] = [_match_straight]


def classify(cards: List[str]) -> Play:
    """
    Classify a set of card ids.

    Args:
        cards: Card ids in any order

    Returns:
        Play with category and rank; category NONE (rank 0) when the cards
        don't form a legal combination. An empty list gives NO_PLAY.

    Raises:
        ValueError: If a card id is not one of the 52 known ids
    """
    if not cards:
        return NO_PLAY

    ordered = sort_cards(cards)
    if len(set(ordered)) != len(ordered):
        return INVALID_PLAY

    for matcher in RULES_BY_SIZE.get(len(ordered), []):
        play = matcher(ordered)
        if play is not None:
            return play

    return INVALID_PLAY
