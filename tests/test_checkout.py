import pytest

from dart_freak.core.throws import ScoredThrow
from dart_freak.engine.checkout import CHECKOUT_TABLE, SEPARATOR, suggest

BOGEY_NUMBERS = {159, 162, 163, 165, 166, 168, 169}


def test_table_covers_every_finishable_score():
    expected = set(range(2, 171)) - BOGEY_NUMBERS
    assert set(CHECKOUT_TABLE) == expected


@pytest.mark.parametrize("score", sorted(CHECKOUT_TABLE))
def test_every_route_is_a_valid_finish(score: int):
    checkout = CHECKOUT_TABLE[score]
    assert len(str(checkout).split(SEPARATOR)) <= 3
    assert checkout.total == score
    last = checkout.throws[-1]
    assert last.is_double


@pytest.mark.parametrize("score", [-5, 0, 1, 171, 180, 501])
def test_no_suggestion_outside_range(score: int):
    assert suggest(score, 3) is None


@pytest.mark.parametrize("score", sorted(BOGEY_NUMBERS))
def test_no_suggestion_for_bogey_numbers(score: int):
    assert suggest(score, 3) is None


def test_one_dart_finishes_use_the_double():
    assert str(suggest(40, 1)) == "D20"
    assert str(suggest(32, 1)) == "D16"
    assert str(suggest(2, 1)) == "D1"
    assert str(suggest(50, 1)) == "Bull"


def test_big_fish():
    checkout = suggest(170, 3)
    assert checkout is not None
    assert str(checkout) == "T20 → T20 → Bull"
    assert checkout.throws[0] == ScoredThrow.parse("T20")


def test_suggestion_needs_enough_darts():
    assert suggest(170, 2) is None
    assert suggest(170, 0) is None
    checkout = suggest(100, 2)
    assert checkout is not None
    assert checkout.dart_count == 2


def test_odd_scores_under_forty_set_up_with_a_single():
    checkout = suggest(39, 3)
    assert checkout is not None
    assert checkout.dart_count == 2
    assert checkout.throws[0].score_type.multiplier == 1
