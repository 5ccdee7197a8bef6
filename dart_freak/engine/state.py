from __future__ import annotations

import datetime
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dart_freak.core.player import Player
    from dart_freak.core.records import TurnRecord
    from dart_freak.core.throws import ScoredThrow

MAX_DARTS_PER_TURN = 3


@dataclass(slots=True)
class LogContext:
    engine_id: int
    total_turn: int = 0
    turn_log_count: int = 0
    current_player_repr: str = "_"
    leg: int = 1

    def new_turn(self, player_repr: str) -> None:
        self.total_turn += 1
        self.turn_log_count = 0
        self.current_player_repr = player_repr

    def inc_log_count(self) -> None:
        self.turn_log_count += 1


@dataclass(slots=True)
class PlayerState:
    idx: int
    player: Player
    score: int = 0
    lives: int = 0
    eliminated: bool = False
    legs_won: int = 0
    assigned_number: int | None = None
    is_killer: bool = False

    @property
    def repr(self) -> str:
        return f"{self.idx}:{self.player.display_name}"

    @property
    def name(self) -> str:
        return self.player.display_name

    @property
    def active(self) -> bool:
        return not self.eliminated


@dataclass(slots=True)
class MatchState:
    players: list[PlayerState]
    current_player_idx: int = 0
    round_index: int = 0
    current_leg: int = 1
    current_throw: list[ScoredThrow] = field(default_factory=list)
    selected_dart_idx: int | None = None
    turn_history: list[TurnRecord] = field(default_factory=list)
    last_turn: TurnRecord | None = None
    winner_idx: int | None = None
    finished: bool = False
    started_at: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC),
    )
    ended_at: datetime.datetime | None = None

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_idx]

    @property
    def active_players(self) -> list[PlayerState]:
        return [p for p in self.players if p.active]

    @property
    def winner(self) -> PlayerState | None:
        if self.winner_idx is None:
            return None
        return self.players[self.winner_idx]

    def turns_for(self, player_idx: int) -> list[TurnRecord]:
        return [t for t in self.turn_history if t.player_idx == player_idx]
