from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Self, override

from dart_freak.core.rules_base import LivesRules, TurnResolution
from dart_freak.core.throws import ScoredThrow, ScoreType

if TYPE_CHECKING:
    from dart_freak.core.types import GameName, KillerDartOutcome
    from dart_freak.engine.game_engine import GameEngine
    from dart_freak.engine.state import PlayerState
    from dart_freak.simulation.config import MatchConfig

BOARD_NUMBERS = range(1, 21)

type DartOutcome = tuple[KillerDartOutcome, tuple[uuid.UUID, ...]]

MISS: DartOutcome = ("miss", ())


@dataclass
class KillerRules(LivesRules):
    """
    Every player owns a random board number.

    A double on your own number makes you a killer. A killer hitting an
    opponent's number takes that many lives from them (single 1, double 2,
    treble 3); a killer hitting their own number takes them from themselves.
    """

    name: ClassVar[GameName] = "Killer"
    display_name: ClassVar[str] = "Killer"
    max_players: ClassVar[int] = len(BOARD_NUMBERS)

    starting_lives: int = 3

    @override
    @classmethod
    def from_config(cls, config: MatchConfig) -> Self:
        return cls(starting_lives=config.starting_lives)

    @override
    def setup(self, engine: GameEngine) -> None:
        players = engine.state.players
        if len(players) > self.max_players:
            raise ValueError(f"Killer supports at most {self.max_players} players")
        super().setup(engine)
        numbers = engine.rng.sample(BOARD_NUMBERS, len(players))
        for p, number in zip(players, numbers, strict=True):
            p.assigned_number = number
            p.is_killer = False
            engine.log_info(f"{p.repr} plays number {number}")

    def owner_of(self, engine: GameEngine, number: int) -> PlayerState | None:
        return next(
            (p for p in engine.state.active_players if p.assigned_number == number),
            None,
        )

    @override
    def resolve_turn(
        self,
        engine: GameEngine,
        player: PlayerState,
        darts: tuple[ScoredThrow, ...],
    ) -> TurnResolution:
        before = player.lives
        outcomes: list[DartOutcome] = []
        for dart in darts:
            # nothing counts once the thrower is out or the match is decided
            if player.eliminated or self.check_winner(engine) is not None:
                outcomes.append(MISS)
                continue
            outcomes.append(self._resolve_dart(engine, player, dart))
        return TurnResolution(
            before,
            player.lives,
            "killer_turn",
            {"dart_outcomes": outcomes},
        )

    def _resolve_dart(
        self,
        engine: GameEngine,
        player: PlayerState,
        dart: ScoredThrow,
    ) -> DartOutcome:
        number = dart.base_value
        if dart.is_bust_marker or number not in BOARD_NUMBERS:
            return MISS

        if not player.is_killer:
            if number == player.assigned_number and dart.is_double:
                player.is_killer = True
                engine.log_info(f"{player.repr} is now a Killer!!!")
                return ("became_killer", ())
            return MISS

        lives = dart.score_type.multiplier
        if number == player.assigned_number:
            engine.log_info(f"{player.repr} hits own number {dart}")
            self.lose_lives(engine, player, lives)
            return ("hit_own_number", (player.player.match_id,))

        victim = self.owner_of(engine, number)
        if victim is None:
            return MISS
        engine.log_info(f"Killer {player.repr} hits {victim.repr} with {dart}")
        self.lose_lives(engine, victim, lives)
        return ("hit_opponent", (victim.player.match_id,))

    @override
    def suggest_aim(self, engine: GameEngine) -> ScoredThrow:
        player = engine.current_player
        if player.assigned_number is None:
            return super().suggest_aim(engine)
        if not player.is_killer:
            return ScoredThrow(player.assigned_number, ScoreType.DOUBLE)
        opponents = [p for p in engine.state.active_players if p.idx != player.idx]
        if not opponents:
            return ScoredThrow(0)
        weakest = min(opponents, key=lambda p: p.lives)
        return ScoredThrow(weakest.assigned_number or 0, ScoreType.TRIPLE)

    @override
    def metadata(self, engine: GameEngine) -> dict[str, str]:
        meta = super().metadata(engine)
        for p in engine.state.players:
            meta[f"player_{p.player.match_id}"] = str(p.assigned_number)
        return meta
