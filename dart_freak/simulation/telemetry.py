from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

from dart_freak.engine.state import MAX_DARTS_PER_TURN

if TYPE_CHECKING:
    from dart_freak.core.records import TurnRecord
    from dart_freak.core.results import MatchResult
    from dart_freak.engine.game_engine import GameEngine

MAX_VISIT = 180


class MatchListener(Protocol):
    def on_turn_saved(self, engine: GameEngine, record: TurnRecord) -> None: ...
    def on_match_finished(self, engine: GameEngine, result: MatchResult) -> None: ...


@dataclass(slots=True)
class PlayerStats:
    name: str
    turns: int = 0
    darts: int = 0
    points: int = 0
    busts: int = 0
    max_visits: int = 0
    checkouts: int = 0
    best_visit: int = 0
    wins: int = 0

    @property
    def three_dart_average(self) -> float:
        if self.darts == 0:
            return 0.0
        return self.points / self.darts * MAX_DARTS_PER_TURN


@dataclass(slots=True)
class MetricsAggregator:
    """
    Accumulates per-player stats across any number of matches.

    Players are keyed by name so repeated simulations of the same roster
    add up.
    """

    stats: dict[str, PlayerStats] = field(default_factory=dict)
    matches: int = 0
    total_turns: int = 0

    def _get_stats(self, name: str) -> PlayerStats:
        if name not in self.stats:
            self.stats[name] = PlayerStats(name)
        return self.stats[name]

    def on_turn_saved(self, engine: GameEngine, record: TurnRecord) -> None:
        stats = self._get_stats(engine.state.players[record.player_idx].name)
        stats.turns += 1
        stats.darts += sum(1 for d in record.darts if not d.is_bust_marker)
        self.total_turns += 1

        if record.is_bust:
            stats.busts += 1
            return
        total = record.throw_total
        stats.points += total
        stats.best_visit = max(stats.best_visit, total)
        if total == MAX_VISIT:
            stats.max_visits += 1
        if record.outcome == "checkout":
            stats.checkouts += 1

    def on_match_finished(self, engine: GameEngine, result: MatchResult) -> None:
        _ = result
        self.matches += 1
        winner = engine.state.winner
        if winner is not None:
            self._get_stats(winner.name).wins += 1

    def win_rates(self) -> dict[str, float]:
        if self.matches == 0:
            return {}
        return {name: s.wins / self.matches for name, s in self.stats.items()}
