import random

import pytest

from dart_freak.ai.smart_agent import SmartAgent
from dart_freak.core.throws import BUST_SENTINEL, ScoredThrow
from dart_freak.games.countdown import CountdownRules, countdown_outcome


def test_valid_turn_commits_and_advances(scenario):
    s = scenario(CountdownRules())
    record = s.play_turn("T20", "T20", "T20")
    assert record is not None
    assert record.outcome == "scored"
    assert (record.score_before, record.score_after) == (301, 121)
    assert s.get_player(0).score == 121
    assert s.current_idx == 1
    assert s.state.current_throw == []


def test_bust_below_zero_keeps_score(scenario):
    s = scenario(CountdownRules())
    s.get_player(0).score = 50
    record = s.play_turn("T20")
    assert record is not None
    assert record.is_bust
    assert record.score_after == record.score_before == 50
    assert s.get_player(0).score == 50
    assert s.current_idx == 1


def test_leaving_one_is_a_bust(scenario):
    s = scenario(CountdownRules())
    s.get_player(0).score = 41
    s.throw("20", "20")
    # one left can never be finished, so the visit is over
    assert s.engine.is_turn_complete
    record = s.play_turn()
    assert record is not None
    assert record.is_bust
    assert s.get_player(0).score == 41


def test_checkout_wins_without_switching_player(scenario):
    s = scenario(CountdownRules())
    s.get_player(0).score = 40
    record = s.play_turn("D20")
    assert record is not None
    assert record.outcome == "checkout"
    assert record.score_after == 0
    assert s.state.finished
    assert s.state.winner_idx == 0
    assert s.current_idx == 0
    assert s.engine.result is not None


def test_bust_marker_ends_turn_immediately(scenario):
    s = scenario(CountdownRules())
    s.throw("T20")
    s.engine.record_throw(BUST_SENTINEL, 1)
    assert len(s.state.turn_history) == 1
    record = s.state.turn_history[0]
    assert record.is_bust
    assert record.darts == (ScoredThrow.parse("T20"),)
    assert s.get_player(0).score == 301
    assert s.current_idx == 1
    assert s.state.current_throw == []


def test_empty_turn_is_not_saved(scenario):
    s = scenario(CountdownRules())
    assert s.engine.save_turn() is None
    assert s.state.turn_history == []
    assert s.current_idx == 0


def test_two_players_end_to_end(scenario):
    s = scenario(CountdownRules(), ["Phil", "Michael"])
    s.play_turn("T20", "T20", "T20")
    assert s.get_player(0).score == 121

    s.play_turn("T20", "T20", "T20")
    s.play_turn("0", "0", "0")
    final = s.play_turn("T20", "T15", "D8")

    assert final is not None
    assert final.player_idx == 1
    assert final.score_after == 0
    assert s.state.winner is s.get_player(1)
    assert s.engine.result is not None
    assert s.engine.result.winner is not None
    assert s.engine.result.winner.display_name == "Michael"
    assert [t.turn_number for t in s.state.turns_for(1)] == [1, 2]


def test_undo_restores_exact_state(scenario):
    s = scenario(CountdownRules())
    s.play_turn("T20", "T20", "T20")
    s.play_turn("20", "20", "20")
    assert s.get_player(1).score == 241

    assert s.engine.undo_last_turn() is True
    assert s.get_player(1).score == 301
    assert s.current_idx == 1
    assert len(s.state.turn_history) == 1

    # single level only
    assert s.engine.undo_last_turn() is False
    assert s.get_player(0).score == 121
    assert len(s.state.turn_history) == 1


def test_undo_reverts_a_bust(scenario):
    s = scenario(CountdownRules())
    s.get_player(0).score = 10
    s.play_turn("T20")
    assert s.engine.undo_last_turn() is True
    assert s.get_player(0).score == 10
    assert s.current_idx == 0
    assert s.state.turn_history == []


def test_undo_unavailable_after_winner(scenario):
    s = scenario(CountdownRules())
    s.get_player(0).score = 32
    s.play_turn("D16")
    assert s.state.finished
    assert s.engine.undo_last_turn() is False
    assert s.get_player(0).score == 0


def test_double_out_requires_double_finish(scenario):
    s = scenario(CountdownRules(double_out=True))
    s.get_player(0).score = 40
    record = s.play_turn("T10", "5", "5")
    assert record is not None
    assert record.is_bust
    assert s.get_player(0).score == 40

    s.play_turn("0", "0", "0")
    record = s.play_turn("D20")
    assert record is not None
    assert record.outcome == "checkout"


def test_best_of_three_legs(scenario):
    s = scenario(CountdownRules(match_format=3))
    s.get_player(0).score = 40
    s.play_turn("D20")

    assert not s.state.finished
    assert s.get_player(0).legs_won == 1
    assert s.state.current_leg == 2
    assert s.scores() == [301, 301]
    assert s.current_idx == 0
    # a new leg clears undo history
    assert s.engine.undo_last_turn() is False

    s.get_player(0).score = 40
    record = s.play_turn("D20")
    assert record is not None
    assert record.leg == 2
    assert s.state.finished
    assert s.engine.result is not None
    assert s.engine.result.total_legs_played == 2
    assert s.engine.result.match_format == 3


def test_invalid_match_format():
    with pytest.raises(ValueError):
        CountdownRules(match_format=2)


def test_checkout_suggestion_tracks_darts(scenario):
    s = scenario(CountdownRules())
    s.get_player(0).score = 170
    checkout = s.engine.suggested_checkout
    assert checkout is not None
    assert checkout.dart_count == 3

    s.throw("0")
    # 170 needs three darts, two are left
    assert s.engine.suggested_checkout is None

    s.engine.undo_last_dart()
    s.throw("T20")
    checkout = s.engine.suggested_checkout
    assert checkout is not None
    assert checkout.total == 110


def test_can_bust(scenario):
    s = scenario(CountdownRules())
    rules = s.rules
    assert rules.can_bust(s.engine) is False
    s.get_player(0).score = 100
    assert rules.can_bust(s.engine) is True


def test_five_hundred_and_one_game_type(scenario):
    s = scenario(CountdownRules(starting_score=501))
    assert s.scores() == [501, 501]
    assert s.rules.game_type == "501"


@pytest.mark.parametrize("seed", range(10))
def test_committed_scores_never_negative_or_one(scenario, seed: int):
    s = scenario(CountdownRules(), 3)
    s.engine.run_match(SmartAgent(rng=random.Random(seed), accuracy=0.5), max_turns=600)
    for record in s.state.turn_history:
        assert record.score_after >= 0
        assert record.score_after != 1
        before, total = record.score_before, record.throw_total
        if before - total < 0 or before - total == 1:
            assert record.is_bust
            assert record.score_after == before


def test_countdown_outcome_is_pure():
    darts = [ScoredThrow.parse(x) for x in ("T20", "T20", "T20")]
    assert countdown_outcome(301, darts) == (121, "scored")
    assert countdown_outcome(180, darts) == (0, "checkout")
    assert countdown_outcome(181, darts) == (181, "bust")
    assert countdown_outcome(179, darts) == (179, "bust")
    assert countdown_outcome(180, darts, double_out=True) == (180, "bust")
