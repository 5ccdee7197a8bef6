from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Self, override

from dart_freak.core.rules_base import LivesRules, TurnResolution
from dart_freak.core.throws import throws_total

if TYPE_CHECKING:
    from dart_freak.core.throws import ScoredThrow
    from dart_freak.core.types import GameName, TurnOutcome
    from dart_freak.engine.game_engine import GameEngine
    from dart_freak.engine.state import PlayerState
    from dart_freak.simulation.config import MatchConfig


@dataclass
class KnockoutRules(LivesRules):
    """Beat the score to beat, strictly, or lose a life."""

    name: ClassVar[GameName] = "Knockout"
    display_name: ClassVar[str] = "Knockout"

    starting_lives: int = 3
    score_to_beat: int | None = field(default=None, init=False)

    @override
    @classmethod
    def from_config(cls, config: MatchConfig) -> Self:
        return cls(starting_lives=config.starting_lives)

    @override
    def setup(self, engine: GameEngine) -> None:
        super().setup(engine)
        self.score_to_beat = None

    def points_needed(self, engine: GameEngine) -> int:
        """Points still required this turn to survive (0 once safe)."""
        if self.score_to_beat is None:
            return 0
        return max(0, self.score_to_beat - engine.current_throw_total + 1)

    @override
    def resolve_turn(
        self,
        engine: GameEngine,
        player: PlayerState,
        darts: tuple[ScoredThrow, ...],
    ) -> TurnResolution:
        total = throws_total(darts)
        before = player.lives
        outcome: TurnOutcome

        if self.score_to_beat is None:
            # opening turn sets the bar without risk
            self.score_to_beat = total
            outcome = "score_to_beat"
            engine.log_info(f"{player.repr} sets the score to beat: {total}")
        elif total > self.score_to_beat:
            engine.log_info(f"{player.repr} beats {self.score_to_beat} with {total}")
            self.score_to_beat = total
            outcome = "score_to_beat"
        else:
            engine.log_info(f"{player.repr} fails to beat {self.score_to_beat} with {total}")
            self.lose_lives(engine, player)
            outcome = "life_lost"

        return TurnResolution(
            before,
            player.lives,
            outcome,
            {"turn_total": total, "score_to_beat": self.score_to_beat},
        )
