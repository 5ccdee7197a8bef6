from dart_freak.engine.pacing import Pacing
from dart_freak.games.sudden_death import SuddenDeathRules
from dart_freak.simulation.config import MatchConfig


def test_lowest_scores_lose_a_life_together(scenario):
    s = scenario(SuddenDeathRules(starting_lives=3), ["A", "B", "C"])
    s.play_turn("20", "6")
    s.play_turn("T6", "8")
    assert s.rules.players_in_danger() == {0, 1}
    s.play_turn("20", "20", "1")

    assert s.lives() == [2, 2, 3]
    round_one = s.rules.round_history[0]
    assert round_one.losers == (0, 1)
    assert round_one.scores == {0: 26, 1: 26, 2: 41}
    assert not round_one.voided
    assert s.state.round_index == 1
    assert s.current_idx == 0


def snapshot_at_pause(rules: SuddenDeathRules, seen: list) -> Pacing:
    def sleep(_delay: float) -> None:
        seen.append((dict(rules.display_lives), rules.players_in_danger(), rules.round_closed))

    return Pacing(delay=1.0, sleep=sleep)


def test_display_lives_follow_when_next_round_starts(scenario):
    rules = SuddenDeathRules(starting_lives=3)
    seen: list = []
    s = scenario(rules, ["A", "B", "C"], pacing=snapshot_at_pause(rules, seen))
    s.play_round(("5",), ("20",), ("20",))

    # during the reveal pause after the last thrower
    display, danger, closed = seen[-1]
    assert closed
    assert s.lives() == [2, 3, 3]
    assert display == {0: 3, 1: 3, 2: 3}
    assert danger == {0}
    assert rules.last_round is not None
    assert rules.last_round.losers == (0,)

    # the next round has started
    assert not rules.round_closed
    assert rules.display_lives == {0: 2, 1: 3, 2: 3}
    assert rules.players_in_danger() == set()


def test_display_lives_immediate_when_not_held_back(scenario):
    rules = SuddenDeathRules(starting_lives=3, hold_back_display=False)
    seen: list = []
    s = scenario(rules, ["A", "B", "C"], pacing=snapshot_at_pause(rules, seen))
    s.play_round(("5",), ("20",), ("20",))
    display, _, _ = seen[-1]
    assert display == {0: 2, 1: 3, 2: 3}


def test_two_player_tie_costs_nobody(scenario):
    s = scenario(SuddenDeathRules(starting_lives=2), ["A", "B"])
    s.play_round(("20",), ("T5", "5"))
    assert s.lives() == [2, 2]
    assert s.rules.round_history[0].losers == ()
    assert s.rules.round_number == 2


def test_two_player_tie_without_replay(scenario):
    rules = SuddenDeathRules(starting_lives=2, two_player_tie_replays=False)
    s = scenario(rules, ["A", "B"])
    s.play_round(("20",), ("20",))
    assert s.lives() == [1, 1]


def test_round_that_would_end_everyone_is_void(scenario):
    s = scenario(SuddenDeathRules(starting_lives=1), ["A", "B", "C"])
    s.play_round(("5",), ("5",), ("5",))
    assert s.lives() == [1, 1, 1]
    assert s.rules.round_history[0].voided
    assert not s.state.finished
    assert s.state.round_index == 1


def test_eliminated_players_sit_out_until_the_winner(scenario):
    s = scenario(SuddenDeathRules(starting_lives=1), ["A", "B", "C"])
    s.play_round(("10",), ("20",), ("20",))
    assert s.get_player(0).eliminated
    # A is out, so B opens the next round
    assert s.current_idx == 1

    record = s.play_turn("5")
    assert record is not None
    assert record.outcome == "round_score"
    assert (record.score_before, record.score_after) == (20, 25)
    assert record.metadata == {"round": 2, "round_total": 5}

    s.play_turn("10")
    assert s.state.finished
    assert s.state.winner_idx == 2
    assert s.rules.display_lives == {0: 0, 1: 0, 2: 1}

    result = s.engine.result
    assert result is not None
    assert result.metadata == {"starting_lives": "1", "rounds_played": "2"}
    assert [p.final_score for p in result.players] == [0, 0, 1]


def test_empty_turn_scores_zero(scenario):
    s = scenario(SuddenDeathRules(starting_lives=2), ["A", "B", "C"])
    s.play_round((), ("1",), ("1",))
    assert s.lives() == [1, 2, 2]


def test_config_controls_display_hold_back():
    rules = SuddenDeathRules.from_config(MatchConfig(game="SuddenDeath", hold_back_display=False))
    assert rules.hold_back_display is False
