"""Finished-match payloads handed to persistence sinks."""

from __future__ import annotations

import datetime
import uuid

import msgspec


class MatchDart(msgspec.Struct, frozen=True):
    base_value: int
    multiplier: int
    outcome: str | None = None  # per-dart game outcome, e.g. Killer hits
    affected_player_ids: list[uuid.UUID] = msgspec.field(default_factory=list)


class MatchTurn(msgspec.Struct, frozen=True):
    turn_number: int
    darts: list[MatchDart]
    score_before: int
    score_after: int
    is_bust: bool = False
    outcome: str = "scored"
    leg: int = 1
    target_display: str | None = None


class MatchPlayer(msgspec.Struct, frozen=True):
    id: uuid.UUID
    display_name: str
    nickname: str
    is_guest: bool
    final_score: int
    starting_score: int
    total_darts_thrown: int
    turn_count: int
    turns: list[MatchTurn] = msgspec.field(default_factory=list)
    legs_won: int = 0
    avatar_url: str | None = None


class MatchResult(msgspec.Struct, frozen=True, kw_only=True):
    """
    Immutable record of a completed match.

    Created once when the engine declares a winner; owned by the
    persistence sinks afterwards.
    """

    id: uuid.UUID
    game_type: str
    players: list[MatchPlayer]
    winner_id: uuid.UUID
    started_at: datetime.datetime
    ended_at: datetime.datetime
    match_format: int = 1
    total_legs_played: int = 1
    metadata: dict[str, str] = msgspec.field(default_factory=dict)

    @property
    def winner(self) -> MatchPlayer | None:
        return next((p for p in self.players if p.id == self.winner_id), None)

    @property
    def duration(self) -> datetime.timedelta:
        return self.ended_at - self.started_at

    def to_json(self) -> bytes:
        return msgspec.json.encode(self)

    @classmethod
    def from_json(cls, data: bytes | str) -> MatchResult:
        return msgspec.json.decode(data, type=cls)
