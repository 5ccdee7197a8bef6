import random

import pytest

from dart_freak.core.throws import ScoredThrow
from dart_freak.games.halve_it import HalveItRules, HalveItTarget, generate_targets

TARGETS = ["20", "D16", "T19", "15", "D10", "BULL"]


def make_rules(targets: list[str] = TARGETS) -> HalveItRules:
    return HalveItRules(difficulty="medium", targets=[HalveItTarget.parse(t) for t in targets])


def test_miss_with_three_darts_halves_rounding_up(scenario):
    s = scenario(make_rules(), 1)
    s.get_player(0).score = 41
    record = s.play_turn("1", "2", "3")
    assert record is not None
    assert record.outcome == "halved"
    assert (record.score_before, record.score_after) == (41, 21)


def test_halving_zero_stays_zero(scenario):
    s = scenario(make_rules(), 1)
    record = s.play_turn("1", "2", "3")
    assert record is not None
    assert record.score_after == 0


def test_empty_turn_halves(scenario):
    s = scenario(make_rules(), 1)
    s.get_player(0).score = 10
    record = s.play_turn()
    assert record is not None
    assert record.outcome == "halved"
    assert s.get_player(0).score == 5


def test_single_target_counts_any_ring(scenario):
    s = scenario(make_rules(), 1)
    record = s.play_turn("T20", "20", "D20")
    assert record is not None
    assert record.outcome == "scored"
    assert record.score_after == 60 + 20 + 40
    assert record.metadata["hits"] == 3


def test_double_target_is_strict(scenario):
    s = scenario(make_rules(["D16", "BULL"]), 1)
    record = s.play_turn("16", "T16", "D16")
    assert record is not None
    assert record.score_after == 32
    assert record.metadata["hits"] == 1


def test_bull_target_accepts_both_rings(scenario):
    s = scenario(make_rules(["BULL"]), 1)
    record = s.play_turn("25", "Bull", "20")
    assert record is not None
    assert record.score_after == 75


def test_partial_visit_without_hits_is_not_halved(scenario):
    s = scenario(make_rules(), 1)
    s.get_player(0).score = 30
    record = s.play_turn("5")
    assert record is not None
    assert record.outcome == "scored"
    assert record.score_after == 30


def test_rounds_advance_after_every_player(scenario):
    s = scenario(make_rules(), 2)
    s.play_turn("20", "0", "0")
    assert (s.current_idx, s.state.round_index) == (1, 0)
    s.play_turn("0", "0", "0")
    assert (s.current_idx, s.state.round_index) == (0, 1)
    assert s.rules.current_target(s.engine) == HalveItTarget("double", 16)


def test_winner_after_last_target(scenario):
    s = scenario(make_rules(), ["A", "B"])
    # B never hits a target
    for _ in TARGETS:
        s.play_turn("T20", "T19", "Bull")
        s.play_turn("1", "1", "1")
    assert s.state.finished
    assert s.state.winner_idx == 0
    assert s.engine.result is not None
    assert s.engine.result.metadata["difficulty"] == "medium"
    turns = s.engine.result.players[0].turns
    assert [t.target_display for t in turns] == ["20", "D16", "T19", "15", "D10", "BULL"]


def test_highest_score_wins_with_seat_order_breaking_ties(scenario):
    s = scenario(make_rules(), ["A", "B", "C"])
    for p, score in zip(s.state.players, (38, 50, 50), strict=True):
        p.score = score
    s.state.round_index = len(TARGETS)
    assert s.rules.check_winner(s.engine) == 1


def test_everyone_on_zero_still_has_a_winner(scenario):
    s = scenario(make_rules(["20"]), ["A", "B"])
    s.play_turn("1", "1", "1")
    s.play_turn("1", "1", "1")
    assert s.state.finished
    assert s.state.winner_idx == 0


def test_aim_follows_target(scenario):
    s = scenario(make_rules(["D16", "BULL"]), 1)
    assert s.rules.suggest_aim(s.engine) == ScoredThrow.parse("D16")


@pytest.mark.parametrize(
    ("difficulty", "kinds"),
    [
        ("easy", {"single"}),
        ("medium", {"single", "double"}),
        ("hard", {"single", "double", "triple"}),
        ("pro", {"single", "double", "triple"}),
    ],
)
def test_generated_targets(difficulty, kinds):
    for seed in range(20):
        targets = generate_targets(difficulty, random.Random(seed))
        assert len(targets) == 6
        assert targets[-1] == HalveItTarget.bull()
        assert len(set(targets[:5])) == 5
        assert {t.kind for t in targets[:5]} <= kinds


def test_targets_generated_at_setup(scenario):
    s = scenario(HalveItRules(difficulty="hard"), 2, rng=random.Random(3))
    assert len(s.rules.target_list) == 6


@pytest.mark.parametrize("label", ["21", "T25", "D0"])
def test_bad_target_labels(label):
    with pytest.raises(ValueError):
        HalveItTarget.parse(label)
