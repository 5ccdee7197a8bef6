from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Self, override

from dart_freak.core.rules_base import GameRules, TurnResolution
from dart_freak.core.throws import ScoredThrow, ScoreType, throws_total
from dart_freak.engine.checkout import suggest
from dart_freak.engine.state import MAX_DARTS_PER_TURN

if TYPE_CHECKING:
    from collections.abc import Sequence

    from dart_freak.core.records import TurnRecord
    from dart_freak.core.types import GameName, TurnOutcome
    from dart_freak.engine.checkout import Checkout
    from dart_freak.engine.game_engine import GameEngine
    from dart_freak.engine.state import PlayerState
    from dart_freak.simulation.config import MatchConfig

MAX_DART_SCORE = 60
MAX_TURN_SCORE = MAX_DART_SCORE * MAX_DARTS_PER_TURN
MATCH_FORMATS = (1, 3, 5, 7)


def countdown_outcome(
    score_before: int,
    darts: Sequence[ScoredThrow],
    *,
    double_out: bool = False,
) -> tuple[int, TurnOutcome]:
    """
    Score a countdown visit.

    Returns the committed score and the outcome. A visit that would leave
    the player below zero or on exactly one is a bust and leaves the score
    unchanged; so does a double-out finish on anything but a double.
    """
    remaining = score_before - throws_total(darts)
    if remaining < 0 or remaining == 1:
        return score_before, "bust"
    if remaining == 0:
        scoring = [d for d in darts if d.total_value > 0]
        if double_out and (not scoring or not scoring[-1].is_double):
            return score_before, "bust"
        return 0, "checkout"
    return remaining, "scored"


@dataclass
class CountdownRules(GameRules):
    """301/501: race from the starting score down to exactly zero."""

    name: ClassVar[GameName] = "Countdown"
    display_name: ClassVar[str] = "Countdown"
    supports_undo: ClassVar[bool] = True
    allows_empty_turn: ClassVar[bool] = False
    bust_marker_ends_turn: ClassVar[bool] = True

    starting_score: int = 301
    match_format: int = 1  # best-of legs
    double_out: bool = False

    def __post_init__(self) -> None:
        if self.match_format not in MATCH_FORMATS:
            raise ValueError(
                f"match_format must be one of {MATCH_FORMATS}, got {self.match_format}",
            )
        if self.starting_score < 2:
            raise ValueError(f"Starting score too low: {self.starting_score}")

    @override
    @classmethod
    def from_config(cls, config: MatchConfig) -> Self:
        return cls(
            starting_score=config.starting_score,
            match_format=config.match_format,
            double_out=config.double_out,
        )

    @property
    @override
    def starting_value(self) -> int:
        return self.starting_score

    @property
    @override
    def game_type(self) -> str:
        return str(self.starting_score)

    @property
    def legs_needed(self) -> int:
        return self.match_format // 2 + 1

    def remaining(self, engine: GameEngine) -> int:
        return engine.current_score - engine.current_throw_total

    def can_bust(self, engine: GameEngine) -> bool:
        """Whether the darts still in hand could take the player bust."""
        darts_left = engine.darts_remaining
        return darts_left > 0 and self.remaining(engine) <= darts_left * MAX_DART_SCORE + 1

    @override
    def is_turn_complete(self, engine: GameEngine) -> bool:
        if len(engine.state.current_throw) >= MAX_DARTS_PER_TURN:
            return True
        return self.remaining(engine) <= 1

    @override
    def resolve_turn(
        self,
        engine: GameEngine,
        player: PlayerState,
        darts: tuple[ScoredThrow, ...],
    ) -> TurnResolution:
        before = player.score
        after, outcome = countdown_outcome(before, darts, double_out=self.double_out)
        if outcome == "bust":
            engine.log_info(f"{player.repr} BUST on {before}")
            return TurnResolution(before, before, "bust")

        player.score = after
        if throws_total(darts) == MAX_TURN_SCORE:
            engine.log_info(f"{player.repr} hits 180!!!")
        if outcome == "scored":
            return TurnResolution(before, after, "scored")

        player.legs_won += 1
        engine.log_info(
            f"{player.repr} CHECKOUT {before} for leg {engine.state.current_leg} "
            f"({player.legs_won}/{self.legs_needed})",
        )
        if player.legs_won >= self.legs_needed:
            return TurnResolution(before, 0, "checkout", winner_idx=player.idx)
        return TurnResolution(before, 0, "checkout", leg_won=True)

    @override
    def bust(self, engine: GameEngine, player: PlayerState) -> TurnResolution:
        return TurnResolution(player.score, player.score, "bust")

    @override
    def revert_turn(self, engine: GameEngine, record: TurnRecord) -> None:
        engine.state.players[record.player_idx].score = record.score_before

    @override
    def start_next_leg(self, engine: GameEngine) -> None:
        state = engine.state
        state.current_leg += 1
        for p in state.players:
            p.score = self.starting_score
        state.current_player_idx = 0
        state.last_turn = None
        engine.log_info(f"Leg {state.current_leg} starts")

    @override
    def suggested_checkout(self, engine: GameEngine) -> Checkout | None:
        return suggest(self.remaining(engine), engine.darts_remaining)

    @override
    def suggest_aim(self, engine: GameEngine) -> ScoredThrow:
        checkout = self.suggested_checkout(engine)
        if checkout is not None:
            return checkout.throws[0]
        return ScoredThrow(20, ScoreType.TRIPLE)

    @override
    def metadata(self, engine: GameEngine) -> dict[str, str]:
        meta = {"match_format": str(self.match_format)}
        if self.double_out:
            meta["double_out"] = "true"
        return meta
