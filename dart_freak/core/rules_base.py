from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Self

from dart_freak.core.throws import ScoredThrow, ScoreType
from dart_freak.engine.state import MAX_DARTS_PER_TURN

if TYPE_CHECKING:
    from dart_freak.core.records import TurnRecord
    from dart_freak.core.types import GameName, TurnOutcome
    from dart_freak.engine.checkout import Checkout
    from dart_freak.engine.game_engine import GameEngine
    from dart_freak.engine.state import PlayerState
    from dart_freak.simulation.config import MatchConfig


@dataclass(frozen=True, slots=True)
class TurnResolution:
    """What a rule set decided about one buffered turn."""

    score_before: int
    score_after: int
    outcome: TurnOutcome
    metadata: dict[str, Any] = field(default_factory=dict)
    winner_idx: int | None = None
    leg_won: bool = False


class AimHintMixin:
    """Default aiming hint for automated throwers: treble 20."""

    def suggest_aim(self, engine: GameEngine) -> ScoredThrow:
        _ = engine
        return ScoredThrow(20, ScoreType.TRIPLE)


class GameRules(AimHintMixin, ABC):
    """
    Strategy plugged into the generic turn engine.

    The engine owns turn sequencing (buffer, history, undo bookkeeping,
    pacing, finishing); a rule set only decides what a turn means and who
    plays next.
    """

    name: ClassVar[GameName]
    display_name: ClassVar[str]
    supports_undo: ClassVar[bool] = False
    allows_empty_turn: ClassVar[bool] = True
    bust_marker_ends_turn: ClassVar[bool] = False
    min_players: ClassVar[int] = 1

    @classmethod
    @abstractmethod
    def from_config(cls, config: MatchConfig) -> Self: ...

    @property
    def starting_value(self) -> int:
        return 0

    @property
    def match_format(self) -> int:
        return 1

    @property
    def game_type(self) -> str:
        return self.display_name

    def setup(self, engine: GameEngine) -> None:
        count = len(engine.state.players)
        if count < self.min_players:
            raise ValueError(
                f"{self.display_name} needs at least {self.min_players} players, got {count}",
            )
        for p in engine.state.players:
            p.score = self.starting_value

    def is_turn_complete(self, engine: GameEngine) -> bool:
        return len(engine.state.current_throw) >= MAX_DARTS_PER_TURN

    @abstractmethod
    def resolve_turn(
        self,
        engine: GameEngine,
        player: PlayerState,
        darts: tuple[ScoredThrow, ...],
    ) -> TurnResolution:
        """Apply a completed turn to the match state and describe it."""

    def bust(self, engine: GameEngine, player: PlayerState) -> TurnResolution:
        raise NotImplementedError(f"{self.display_name} has no bust marker")

    def revert_turn(self, engine: GameEngine, record: TurnRecord) -> None:
        raise NotImplementedError(f"{self.display_name} does not support undo")

    def advance(self, engine: GameEngine) -> None:
        engine.advance_to_next_active()

    def check_winner(self, engine: GameEngine) -> int | None:
        _ = engine
        return None

    def start_next_leg(self, engine: GameEngine) -> None:
        raise NotImplementedError(f"{self.display_name} is a single-leg game")

    def final_score(self, player: PlayerState) -> int:
        return player.score

    def suggested_checkout(self, engine: GameEngine) -> Checkout | None:
        _ = engine
        return None

    def target_display(self, record: TurnRecord) -> str | None:
        _ = record
        return None

    def metadata(self, engine: GameEngine) -> dict[str, str]:
        _ = engine
        return {}


class LivesRules(GameRules, ABC):
    """Base for elimination games: last player with lives standing wins."""

    min_players: ClassVar[int] = 2
    starting_lives: int

    def setup(self, engine: GameEngine) -> None:
        super().setup(engine)
        for p in engine.state.players:
            p.score = 0
            p.lives = self.starting_lives
            p.eliminated = False

    @property
    def starting_value(self) -> int:
        return self.starting_lives

    def lose_lives(self, engine: GameEngine, player: PlayerState, count: int = 1) -> int:
        """Remove up to ``count`` lives (floored at zero); return how many went."""
        lost = min(player.lives, count)
        if lost <= 0:
            return 0
        player.lives -= lost
        engine.log_info(f"{player.repr} -{lost} life ({player.lives} left)")
        if player.lives == 0:
            player.eliminated = True
            engine.log_info(f"{player.repr} is eliminated!!!")
        return lost

    def check_winner(self, engine: GameEngine) -> int | None:
        survivors = engine.state.active_players
        if len(survivors) == 1:
            return survivors[0].idx
        return None

    def final_score(self, player: PlayerState) -> int:
        return player.lives

    def metadata(self, engine: GameEngine) -> dict[str, str]:
        _ = engine
        return {"starting_lives": str(self.starting_lives)}
