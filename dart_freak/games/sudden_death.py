from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Self, override

from dart_freak.core.records import RoundResult
from dart_freak.core.rules_base import LivesRules, TurnResolution
from dart_freak.core.throws import throws_total

if TYPE_CHECKING:
    from dart_freak.core.throws import ScoredThrow
    from dart_freak.core.types import GameName
    from dart_freak.engine.game_engine import GameEngine
    from dart_freak.engine.state import PlayerState
    from dart_freak.simulation.config import MatchConfig


@dataclass
class SuddenDeathRules(LivesRules):
    """
    Everyone throws once per round; the round's lowest total loses a life.

    All players sharing the lowest total lose a life together. With exactly
    two players left a tie costs nobody a life (``two_player_tie_replays``),
    and a round that would knock out every remaining player is void.

    The round resolves when its last thrower commits, so committed lives
    change before the reveal pause. ``display_lives`` follows when the next
    round starts unless ``hold_back_display`` is off.
    """

    name: ClassVar[GameName] = "SuddenDeath"
    display_name: ClassVar[str] = "Sudden Death"

    starting_lives: int = 3
    two_player_tie_replays: bool = True
    hold_back_display: bool = True

    round_scores: dict[int, int] = field(default_factory=dict, init=False)
    round_history: list[RoundResult] = field(default_factory=list, init=False)
    display_lives: dict[int, int] = field(default_factory=dict, init=False)
    round_closed: bool = field(default=False, init=False)

    @override
    @classmethod
    def from_config(cls, config: MatchConfig) -> Self:
        return cls(
            starting_lives=config.starting_lives,
            two_player_tie_replays=config.two_player_tie_replays,
            hold_back_display=config.hold_back_display,
        )

    @override
    def setup(self, engine: GameEngine) -> None:
        super().setup(engine)
        self.round_scores.clear()
        self.round_history.clear()
        self.round_closed = False
        engine.state.round_index = 0
        self._publish_lives(engine)

    @property
    def round_number(self) -> int:
        return len(self.round_history) + 1

    @property
    def last_round(self) -> RoundResult | None:
        return self.round_history[-1] if self.round_history else None

    def players_in_danger(self) -> set[int]:
        """
        Players holding the lowest committed total this round.

        A resolved round keeps its totals until the next round starts.
        """
        if not self.round_scores:
            return set()
        low = min(self.round_scores.values())
        return {idx for idx, score in self.round_scores.items() if score == low}

    @override
    def resolve_turn(
        self,
        engine: GameEngine,
        player: PlayerState,
        darts: tuple[ScoredThrow, ...],
    ) -> TurnResolution:
        total = throws_total(darts)
        before = player.score
        player.score += total
        self.round_scores[player.idx] = total
        resolution = TurnResolution(
            before,
            player.score,
            "round_score",
            {"round": self.round_number, "round_total": total},
        )
        if all(p.idx in self.round_scores for p in engine.state.active_players):
            self._end_round(engine)
        return resolution

    @override
    def advance(self, engine: GameEngine) -> None:
        state = engine.state
        if self.round_closed:
            self._start_round(engine)
            return
        for p in state.players[state.current_player_idx + 1 :]:
            if p.active and p.idx not in self.round_scores:
                state.current_player_idx = p.idx
                return

    def _end_round(self, engine: GameEngine) -> None:
        state = engine.state
        active = state.active_players
        scores = {p.idx: self.round_scores.get(p.idx, 0) for p in active}
        low = min(scores.values())
        losers = tuple(idx for idx, score in scores.items() if score == low)
        voided = False

        if len(active) == 2 and len(losers) == 2 and self.two_player_tie_replays:
            engine.log_info(f"Round {self.round_number} tied on {low}: nobody loses a life")
            losers = ()
        elif len(losers) == len(active) and all(
            state.players[idx].lives <= 1 for idx in losers
        ):
            engine.log_info(f"Round {self.round_number} would end everyone: round void")
            losers = ()
            voided = True

        for idx in losers:
            self.lose_lives(engine, state.players[idx])

        self.round_history.append(
            RoundResult(
                round_number=self.round_number,
                scores=scores,
                losers=losers,
                voided=voided,
            ),
        )
        self.round_closed = True
        if len(state.active_players) <= 1 or not self.hold_back_display:
            self._publish_lives(engine)

    def _start_round(self, engine: GameEngine) -> None:
        state = engine.state
        self.round_scores.clear()
        self.round_closed = False
        state.round_index += 1
        self._publish_lives(engine)
        survivors = state.active_players
        if survivors:
            state.current_player_idx = survivors[0].idx
            engine.log_info(f"Round {self.round_number} starts")

    def _publish_lives(self, engine: GameEngine) -> None:
        self.display_lives = {p.idx: p.lives for p in engine.state.players}

    @override
    def metadata(self, engine: GameEngine) -> dict[str, str]:
        meta = super().metadata(engine)
        meta["rounds_played"] = str(len(self.round_history))
        return meta
