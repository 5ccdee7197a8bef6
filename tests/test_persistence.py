import logging
import uuid
from unittest.mock import MagicMock

import pytest

from dart_freak.engine.logging import LOGGER_NAME
from dart_freak.games.countdown import CountdownRules
from dart_freak.persistence.db_manager import MatchDatabase
from dart_freak.persistence.publisher import ResultPublisher


@pytest.fixture
def finished(scenario):
    s = scenario(CountdownRules(), ["Phil", "Michael"])
    s.play_turn("T20", "T20", "T20")
    s.get_player(1).score = 32
    s.play_turn("D16")
    assert s.engine.result is not None
    return s


@pytest.fixture
def db() -> MatchDatabase:
    return MatchDatabase()


def test_match_is_stored_once(db, finished):
    result = finished.engine.result
    db.save_match(result)
    db.save_match(result)
    assert db.match_count() == 1
    assert db.match_count("301") == 1
    assert db.match_count("501") == 0
    assert db.get_known_match_ids() == {result.id}


def test_player_aggregates_roll_forward(db, finished):
    result = finished.engine.result
    db.save_match(result)
    winner = db.get_player(finished.get_player(1).player.match_id)
    loser = db.get_player(finished.get_player(0).player.match_id)
    assert winner is not None and loser is not None
    assert (winner.total_wins, winner.total_losses) == (1, 0)
    assert (loser.total_wins, loser.total_losses) == (0, 1)
    assert winner.win_rate == 1.0
    assert loser.win_rate == 0.0
    assert winner.total_games == 1
    assert winner.display_name == "Michael"


def test_stored_payload_round_trips(db, finished):
    result = finished.engine.result
    db.save_match(result)
    loaded = db.load_match(result.id)
    assert loaded is not None
    assert loaded.winner_id == result.winner_id
    assert [len(p.turns) for p in loaded.players] == [1, 1]
    assert loaded.players[0].turns[0].score_after == 121


def test_unknown_match_and_player(db):
    assert db.load_match(uuid.uuid4()) is None
    assert db.get_player(uuid.uuid4()) is None


def test_failing_sink_does_not_stop_the_others(caplog, finished):
    caplog.set_level(logging.ERROR, logger=LOGGER_NAME)
    broken = MagicMock()
    broken.save_match.side_effect = RuntimeError("disk full")
    healthy = MagicMock()

    delivered = ResultPublisher([broken, healthy]).publish(finished.engine.result)

    assert delivered == 1
    healthy.save_match.assert_called_once_with(finished.engine.result)
    assert any("Failed to save match" in r.getMessage() for r in caplog.records)


def test_engine_publishes_to_database(scenario, db):
    s = scenario(CountdownRules(), publisher=ResultPublisher([db]))
    s.get_player(0).score = 40
    s.play_turn("D20")
    assert db.match_count() == 1
