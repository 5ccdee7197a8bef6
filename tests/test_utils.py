import random
from unittest.mock import MagicMock

from dart_freak.core.player import Player
from dart_freak.core.records import TurnRecord
from dart_freak.core.rules_base import GameRules
from dart_freak.core.throws import ScoredThrow
from dart_freak.engine import ENGINE_ID_COUNTER
from dart_freak.engine.game_engine import GameEngine
from dart_freak.engine.pacing import Pacing
from dart_freak.engine.state import LogContext, MatchState, PlayerState
from dart_freak.persistence.publisher import ResultPublisher
from dart_freak.simulation.telemetry import MatchListener


class MatchScenario:
    """
    A reusable harness that wraps the GameEngine for testing.

    Darts are given as board labels (``"T20"``, ``"D16"``, ``"5"``,
    ``"Bull"``, ``"0"``, ``"BUST"``).
    """

    def __init__(
        self,
        rules: GameRules,
        players: int | list[str] = 2,
        rng: random.Random | MagicMock | None = None,
        listeners: list[MatchListener] | None = None,
        publisher: ResultPublisher | None = None,
        pacing: Pacing | None = None,
    ):
        names = players if isinstance(players, list) else [f"P{i}" for i in range(players)]
        roster = [Player.create_guest(n) for n in names]

        # Mock the RNG unless the test needs a real one
        self.mock_rng = rng if rng is not None else MagicMock()

        self.state: MatchState = MatchState([PlayerState(i, p) for i, p in enumerate(roster)])
        self.rules = rules
        self.engine: GameEngine = GameEngine(
            self.state,
            rules,
            self.mock_rng,  # pyright: ignore[reportArgumentType]
            log_context=LogContext(engine_id=next(ENGINE_ID_COUNTER)),
            listeners=listeners or [],
            pacing=pacing or Pacing(),
            publisher=publisher,
        )

    def throw(self, *labels: str) -> None:
        for label in labels:
            dart = ScoredThrow.parse(label)
            self.engine.record_throw(dart.base_value, dart.score_type.multiplier)

    def play_turn(self, *labels: str) -> TurnRecord | None:
        """Throw the darts and commit them; returns the committed record."""
        turns_before = len(self.state.turn_history)
        self.throw(*labels)
        if len(self.state.turn_history) == turns_before:
            self.engine.save_turn()
        if len(self.state.turn_history) == turns_before:
            return None
        return self.state.turn_history[-1]

    def play_round(self, *turns: tuple[str, ...]) -> list[TurnRecord | None]:
        return [self.play_turn(*t) for t in turns]

    def get_player(self, idx: int) -> PlayerState:
        return self.state.players[idx]

    @property
    def current_idx(self) -> int:
        return self.state.current_player_idx

    def scores(self) -> list[int]:
        return [p.score for p in self.state.players]

    def lives(self) -> list[int]:
        return [p.lives for p in self.state.players]
