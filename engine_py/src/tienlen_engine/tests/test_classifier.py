"""
Tests for card combination classification.
"""

import pytest

from tienlen_engine.classifier import classify, is_consecutive
from tienlen_engine.constants import CARD_RANK, create_deck, face_rank, format_cards, sort_cards
from tienlen_engine.models import Category


def test_deck_ranks():
    deck = create_deck()
    assert len(deck) == 52
    assert deck[0] == '3c'
    assert deck[-1] == '2s'
    assert CARD_RANK['3c'] == 1
    assert CARD_RANK['3d'] == 2
    assert CARD_RANK['4c'] == 5
    assert CARD_RANK['2s'] == 52
    assert face_rank('3') == 1
    assert face_rank('2') == 13


def test_sort_and_format():
    assert sort_cards(['3c', '2s', 'Th']) == ['2s', 'Th', '3c']
    assert format_cards(['Th', '3c']) == '10♥ 3♣'


def test_empty_is_no_play():
    play = classify([])
    assert play.category == Category.NONE
    assert play.rank == 0
    assert play.name == ''


def test_unknown_card_raises():
    with pytest.raises(ValueError):
        classify(['1x'])


def test_single():
    play = classify(['7h'])
    assert play.category == Category.SINGLES
    assert play.rank == CARD_RANK['7h']
    assert play.name == "Singles, 7h"


def test_pair_and_mismatch():
    play = classify(['Kd', 'Kh'])
    assert play.category == Category.PAIR
    assert play.rank == CARD_RANK['Kh']
    assert play.name == "Pair of K's, Kh high"

    assert classify(['Kd', 'Qh']).category == Category.NONE


def test_triple_beats_straight_for_three_cards():
    triple = classify(['Ac', 'Ad', 'As'])
    assert triple.category == Category.TRIPLE
    assert triple.name == "Three of a Kind; A's"

    straight = classify(['5c', '3d', '4h'])
    assert straight.category == Category.STRAIGHT
    assert straight.size == 3
    assert straight.rank == CARD_RANK['5c']
    assert straight.name == "3 Card Straight, 5c high"


def test_four_card_precedence():
    bomb = classify(['9c', '9d', '9h', '9s'])
    assert bomb.category == Category.BOMB
    assert bomb.rank == 300 + CARD_RANK['9s']
    assert bomb.name == "Bomb! Four of a Kind; 9's"

    assert classify(['3c', '4d', '5h', '6s']).category == Category.STRAIGHT

    two_pair = classify(['Ac', 'Ad', '4c', '4d'])
    assert two_pair.category == Category.TWO_PAIR
    assert two_pair.name == "Two Pair, Ad high"


def test_five_card_precedence():
    straight_flush = classify(['3c', '4c', '5c', '6c', '7c'])
    assert straight_flush.category == Category.STRAIGHT_FLUSH
    assert straight_flush.rank == 100 + CARD_RANK['7c']
    assert straight_flush.name == "Straight Flush, 7c high"

    flush = classify(['3c', '5c', '7c', '9c', 'Jc'])
    assert flush.category == Category.FLUSH
    assert flush.name == "Flush, Jc high"

    straight = classify(['3c', '4d', '5c', '6c', '7c'])
    assert straight.category == Category.STRAIGHT
    assert straight.size == 5


def test_full_house_ranked_by_triple():
    play = classify(['3c', '3d', '3h', 'Ac', 'Ad'])
    assert play.category == Category.FULL_HOUSE
    assert play.rank == CARD_RANK['3h']
    assert play.name == "Full House of 3s"


def test_consecutive_pairs_bomb():
    play = classify(['3c', '3d', '4c', '4d', '5c', '5d'])
    assert play.category == Category.BOMB
    assert play.rank == 200 + CARD_RANK['5d']
    assert play.name == "Bomb! 3 Consecutive Pairs, 5d high"

    assert classify(['3c', '3d', '4c', '4d', '6c', '6d']).category == Category.NONE


def test_long_straights():
    cards = ['3c', '4d', '5h', '6s', '7c', '8d', '9h', 'Ts', 'Jc', 'Qd', 'Kh', 'As', '2c']
    play = classify(cards)
    assert play.category == Category.STRAIGHT
    assert play.size == 13
    assert play.label == "13 Card Straight"

    assert classify(['3c', '4d', '5h', '6s', '7c', '9d', 'Th']).category == Category.NONE


def test_duplicates_are_invalid():
    assert classify(['7h', '7h']).category == Category.NONE


def test_is_consecutive_has_no_wraparound():
    assert is_consecutive(['Qc', 'Kd', 'Ah', '2s'])
    assert not is_consecutive(['Ac', '2d', '3h'])


def test_classification_ignores_input_order():
    cards = ['5d', '3c', '4d', '5c', '3d', '4c']
    assert classify(cards) == classify(list(reversed(cards))) == classify(sorted(cards))
