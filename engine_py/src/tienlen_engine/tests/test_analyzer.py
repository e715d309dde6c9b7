import math

from tienlen_engine.bots.analyzer import analyze_hand, generate_all_plays, group_by_face
from tienlen_engine.bots.evaluator import category_multiplier, evaluate_play
from tienlen_engine.classifier import classify
from tienlen_engine.models import Category

from conftest import make_active_room

HAND = ['9h', '5d', '5c', '4d', '4c', '3d', '3c']
FILLER = ['Kc', 'Kd', 'Kh', 'Ks', 'Qc', 'Qd', 'Qh', 'Qs', 'Jc', 'Jd']


def room_for(hand, **kwargs):
    return make_active_room([list(hand), FILLER[:], FILLER[:], FILLER[:]], **kwargs)


def test_group_by_face():
    groups = group_by_face(HAND)
    assert groups['5'] == ['5d', '5c']
    assert groups['9'] == ['9h']


def test_generate_all_plays_covers_categories():
    plays = generate_all_plays(HAND)
    categories = {candidate.play.category for candidate in plays}
    assert {Category.SINGLES, Category.PAIR, Category.TWO_PAIR,
            Category.STRAIGHT, Category.BOMB} <= categories
    assert sum(1 for c in plays if c.play.category == Category.SINGLES) == 7
    assert sum(1 for c in plays if c.play.category == Category.STRAIGHT) == 8


def test_straights_never_use_twos():
    plays = generate_all_plays(['Qc', 'Kd', 'Ah', '2s'])
    assert not any(c.play.category == Category.STRAIGHT and '2s' in c.cards for c in plays)


def test_free_play_sorted_cheapest_first():
    analysis = analyze_hand(HAND, room_for(HAND), 0)
    assert analysis.is_free_play
    assert analysis.best.cards == ['3c']
    scores = [candidate.score for candidate in analysis.valid_plays]
    assert scores == sorted(scores)


def test_only_plays_that_beat_the_board():
    state = room_for(HAND)
    state.last_by_seat[3] = classify(['4h', '4s'])
    analysis = analyze_hand(HAND, state, 0)

    assert not analysis.is_free_play
    assert [c.play.category for c in analysis.valid_plays] == [Category.PAIR, Category.BOMB]
    assert sorted(analysis.best.cards) == ['5c', '5d']


def test_initial_play_must_include_lowest():
    state = room_for(HAND, initial_play_pending=True, lowest_dealt_card='3c')
    analysis = analyze_hand(HAND, state, 0)
    assert analysis.must_include_lowest
    assert all('3c' in candidate.cards for candidate in analysis.valid_plays)


def test_evaluate_play_costs():
    assert math.isinf(evaluate_play([], None))
    assert math.isinf(evaluate_play(['3c', '9h'], classify(['3c', '9h'])))

    low = evaluate_play(['3c'], classify(['3c']))
    assert low == 0.8

    two = evaluate_play(['2s'], classify(['2s']))
    ace = evaluate_play(['As'], classify(['As']))
    assert two - ace > 10


def test_straight_multiplier_grows_with_length():
    assert category_multiplier(classify(['3c', '4d', '5h'])) == 1.2
    assert category_multiplier(classify(['3c', '4d', '5h', '6s', '7d'])) == 1.4
