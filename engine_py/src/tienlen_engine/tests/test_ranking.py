import pytest

from tienlen_engine.classifier import classify
from tienlen_engine.constants import DISCONNECTED, PASS
from tienlen_engine.errors import StateInvariantViolation
from tienlen_engine.ranking import (
    assign_game_points, assign_rank_to_seat, clear_board, count_remaining_players,
    find_highest_available_rank, find_lowest_available_rank, find_next_turn,
    find_orphaned_seat, should_clear_board
)

from conftest import make_active_room


def four_player_room():
    return make_active_room([['3c'], ['4c'], ['5c'], ['6c']])


def test_available_ranks():
    state = four_player_room()
    assert find_lowest_available_rank(state) == 1
    assert find_highest_available_rank(state) == 4

    state.ranks = [2, None, 1, None]
    assert find_lowest_available_rank(state) == 3
    assert find_highest_available_rank(state) == 4

    state.ranks = [2, 3, 1, 4]
    assert find_lowest_available_rank(state) == 0
    assert find_highest_available_rank(state) == 0


def test_finish_order_points_and_stats():
    state = four_player_room()
    for seat, rank in zip([2, 0, 3, 1], [1, 2, 3, 4]):
        assign_rank_to_seat(state, seat, rank)

    assert state.ranks == [2, 4, 1, 3]
    assert state.stats["p2"].points == 4
    assert state.stats["p0"].points == 3
    assert state.stats["p3"].points == 2
    assert state.stats["p1"].points == 1
    assert state.stats["p2"].first == 1
    assert state.stats["p1"].fourth == 1
    assert all(state.stats[f"p{i}"].games == 1 for i in range(4))
    assert all(state.stats[f"p{i}"].player_games == 4 for i in range(4))


def test_points_scale_with_starting_players():
    state = make_active_room([['3c'], ['4c'], None, None])
    assert assign_game_points(state, 1) == 2
    assert assign_game_points(state, 2) == 1


def test_disconnected_seat_gets_rank_without_stats():
    state = four_player_room()
    state.seats[2] = DISCONNECTED
    assign_rank_to_seat(state, 2, 4)
    assert state.ranks[2] == 4
    assert DISCONNECTED not in state.stats


def test_orphan_detection():
    state = four_player_room()
    state.ranks = [1, None, 2, 3]
    assert count_remaining_players(state) == 1
    assert find_orphaned_seat(state) == (1, 1)


def test_turn_cycles_over_active_seats():
    state = four_player_room()
    assert find_next_turn(state, 0) == 1
    assert find_next_turn(state, 3) == 0

    state.ranks[1] = 1
    state.seats[2] = DISCONNECTED
    assert find_next_turn(state, 0) == 3


def test_no_next_turn_is_invariant_violation():
    state = four_player_room()
    state.ranks = [1, 2, 3, 4]
    with pytest.raises(StateInvariantViolation):
        find_next_turn(state, 0)


def test_two_players_board_clears_after_one_pass():
    state = make_active_room([['3c'], ['4c'], None, None])
    state.board = ['9h']
    state.last_by_seat = [classify(['9h']), PASS, None, None]

    assert should_clear_board(state)
    clear_board(state)
    assert state.board == []
    assert state.discard == ['9h']
    assert state.last_by_seat == [None] * 4


def test_board_holds_until_every_other_seat_passed():
    state = four_player_room()
    state.last_by_seat = [classify(['9h']), PASS, PASS, None]
    assert not should_clear_board(state)

    state.last_by_seat[3] = PASS
    assert should_clear_board(state)


def test_finished_holder_still_clears():
    state = four_player_room()
    state.ranks[0] = 1
    state.last_by_seat = [classify(['9h']), PASS, PASS, PASS]
    assert should_clear_board(state)


def test_repeated_next_turn_visits_each_seat_once():
    state = four_player_room()
    state.ranks[2] = 1

    seen = []
    seat = 0
    for _ in range(3):
        seat = find_next_turn(state, seat)
        seen.append(seat)
    assert seen == [1, 3, 0]
