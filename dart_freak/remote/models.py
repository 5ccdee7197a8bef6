"""Wire models for remote (networked) countdown matches."""

from __future__ import annotations

import datetime
import uuid
from enum import StrEnum

import msgspec

DARTS_PER_VISIT = 3


class RemoteMatchStatus(StrEnum):
    PENDING = "pending"
    SENT = "sent"  # outgoing challenge, never stored server-side
    READY = "ready"
    LOBBY = "lobby"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    EXPIRED = "expired"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in {
            RemoteMatchStatus.READY,
            RemoteMatchStatus.LOBBY,
            RemoteMatchStatus.IN_PROGRESS,
        }

    @property
    def is_finished(self) -> bool:
        return self in {
            RemoteMatchStatus.COMPLETED,
            RemoteMatchStatus.EXPIRED,
            RemoteMatchStatus.CANCELLED,
        }


class LastVisitPayload(msgspec.Struct, frozen=True):
    """The most recent visit as published by the relay."""

    player_id: uuid.UUID
    darts: list[int]
    score_before: int
    score_after: int
    timestamp: datetime.datetime


class RemoteMatch(msgspec.Struct, frozen=True, kw_only=True):
    """Authoritative snapshot of a remote match row."""

    id: uuid.UUID
    challenger_id: uuid.UUID
    receiver_id: uuid.UUID
    game_type: str = "301"
    game_name: str = "301"
    match_mode: str = "remote"
    match_format: int = 1
    status: RemoteMatchStatus | None = msgspec.field(default=None, name="remote_status")
    current_player_id: uuid.UUID | None = None
    challenge_expires_at: datetime.datetime | None = None
    join_window_expires_at: datetime.datetime | None = None
    last_visit_payload: LastVisitPayload | None = None
    created_at: datetime.datetime | None = None
    updated_at: datetime.datetime | None = None

    @property
    def starting_score(self) -> int:
        return int(self.game_type) if self.game_type.isdigit() else 301

    @property
    def participant_ids(self) -> tuple[uuid.UUID, uuid.UUID]:
        return (self.challenger_id, self.receiver_id)

    def opponent_of(self, user_id: uuid.UUID) -> uuid.UUID:
        return self.receiver_id if user_id == self.challenger_id else self.challenger_id

    def is_expired(self, now: datetime.datetime | None = None) -> bool:
        now = now or datetime.datetime.now(datetime.UTC)
        match self.status:
            case RemoteMatchStatus.SENT | RemoteMatchStatus.READY | RemoteMatchStatus.LOBBY:
                deadline = self.join_window_expires_at
            case RemoteMatchStatus.PENDING:
                deadline = self.challenge_expires_at
            case _:
                deadline = None
        return deadline is not None and now > deadline

    @classmethod
    def from_json(cls, data: bytes | str) -> RemoteMatch:
        return msgspec.json.decode(data, type=cls)


class VisitSubmission(msgspec.Struct, frozen=True):
    """One visit as sent to the relay: exactly three dart values."""

    match_id: uuid.UUID
    darts: list[int]
    score_before: int
    score_after: int

    def __post_init__(self) -> None:
        if len(self.darts) != DARTS_PER_VISIT:
            raise ValueError(f"A visit holds exactly {DARTS_PER_VISIT} darts, got {len(self.darts)}")
