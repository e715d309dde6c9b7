"""
Tests for play validation and the board-beat rule.
"""

from tienlen_engine.classifier import classify
from tienlen_engine.constants import PASS, STAGE_SEATING
from tienlen_engine.errors import (
    ACTION_NOT_ALLOWED, MISSING_LOWEST_CARD, NOT_YOUR_TURN, OWNERSHIP_MISMATCH,
    PATTERN_MISMATCH, RANK_TOO_LOW
)
from tienlen_engine.models import FREE_PLAY, Category
from tienlen_engine.validate import get_last_play, play_beats_board, validate_play

from conftest import make_active_room


def test_free_play_accepts_anything_valid():
    assert play_beats_board(classify(['3c']), FREE_PLAY)
    assert not play_beats_board(classify(['3c', '4d']), FREE_PLAY)


def test_same_shape_needs_higher_rank():
    assert play_beats_board(classify(['7d']), classify(['7c']))
    assert not play_beats_board(classify(['7c']), classify(['7d']))
    assert not play_beats_board(classify(['Kc', 'Kd']), classify(['7c']))


def test_straights_must_match_length():
    four = classify(['3c', '4d', '5h', '6s'])
    five = classify(['4c', '5d', '6h', '7s', '8c'])
    assert not play_beats_board(five, four)


def test_bomb_beats_non_bombs_and_lower_bombs():
    quad = classify(['9c', '9d', '9h', '9s'])
    pairs = classify(['3c', '3d', '4c', '4d', '5c', '5d'])
    assert play_beats_board(quad, classify(['2s']))
    assert play_beats_board(pairs, classify(['2s', '2h']))
    assert play_beats_board(quad, pairs)
    assert not play_beats_board(pairs, quad)


def test_straight_flush_over_flush_and_straight():
    straight_flush = classify(['3c', '4c', '5c', '6c', '7c'])
    flush = classify(['8s', 'Ts', 'Js', 'Ks', '2s'])
    straight = classify(['9c', 'Td', 'Jh', 'Qs', 'Kc'])
    assert play_beats_board(straight_flush, flush)
    assert play_beats_board(straight_flush, straight)
    assert not play_beats_board(flush, straight_flush)
    assert not play_beats_board(straight_flush, classify(['3d', '3h', '3s', '4h', '4s']))


def test_get_last_play_skips_passes():
    state = make_active_room([['3c'], ['4c'], ['5c'], ['6c']])
    assert get_last_play(state, 0) == FREE_PLAY

    held = classify(['9h'])
    state.last_by_seat = [None, held, PASS, PASS]
    assert get_last_play(state, 0).name == "Singles, 9h"
    assert get_last_play(state, 2) == held


def test_validate_play_codes():
    state = make_active_room(
        [['3c', '5d', '9h'], ['4c', '6d'], None, None],
        initial_play_pending=True,
        lowest_dealt_card='3c',
    )

    result = validate_play(state, 1, ['4c'])
    assert result.error_code == NOT_YOUR_TURN

    result = validate_play(state, 0, ['4c'])
    assert result.error_code == OWNERSHIP_MISMATCH

    result = validate_play(state, 0, ['3c', '3c'])
    assert result.error_code == OWNERSHIP_MISMATCH

    result = validate_play(state, 0, ['5d'])
    assert result.error_code == MISSING_LOWEST_CARD

    result = validate_play(state, 0, ['3c', '9h'])
    assert result.error_code == PATTERN_MISMATCH

    result = validate_play(state, 0, [])
    assert result.error_code == PATTERN_MISMATCH

    result = validate_play(state, 0, ['3c'])
    assert result.valid
    assert result.play.category == Category.SINGLES


def test_validate_play_rank_too_low():
    state = make_active_room([['5d'], ['4c'], None, None], turn_index=1)
    state.last_by_seat[0] = classify(['5d'])

    result = validate_play(state, 1, ['4c'])
    assert not result.valid
    assert result.error_code == RANK_TOO_LOW
    assert result.error_message == "Singles, 4c doesn't beat Singles, 5d"


def test_validate_play_outside_game():
    state = make_active_room([['5d'], ['4c'], None, None])
    state.stage = STAGE_SEATING
    assert validate_play(state, 0, ['5d']).error_code == ACTION_NOT_ALLOWED
