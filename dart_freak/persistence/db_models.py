"""Database models for finished matches."""

import datetime
import uuid

from sqlmodel import Field, SQLModel


class MatchRow(SQLModel, table=True):
    """One finished match; ``payload`` keeps the full JSON result."""

    __tablename__ = "matches"  # pyright: ignore[reportAssignmentType, reportUnannotatedClassAttribute]

    id: uuid.UUID = Field(primary_key=True)

    game_type: str
    winner_id: uuid.UUID
    started_at: datetime.datetime
    ended_at: datetime.datetime
    duration_s: float
    match_format: int
    total_legs_played: int
    player_count: int

    # Serialized MatchResult (turn history included)
    payload: str

    created_at: datetime.datetime = Field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC),
    )


class MatchPlayerRow(SQLModel, table=True):
    """One player's line in a finished match."""

    __tablename__ = "match_players"  # pyright: ignore[reportAssignmentType, reportUnannotatedClassAttribute]

    # Composite Primary Key (match_id + player_id)
    match_id: uuid.UUID = Field(primary_key=True, foreign_key="matches.id")
    player_id: uuid.UUID = Field(primary_key=True)

    seat: int
    display_name: str
    final_score: int
    starting_score: int
    total_darts_thrown: int
    turn_count: int
    legs_won: int
    won: bool


class PlayerRow(SQLModel, table=True):
    """Win/loss aggregates per player, rolled forward after each match."""

    __tablename__ = "players"  # pyright: ignore[reportAssignmentType, reportUnannotatedClassAttribute]

    id: uuid.UUID = Field(primary_key=True)
    display_name: str
    nickname: str
    is_guest: bool = True
    avatar_url: str | None = None

    total_wins: int = 0
    total_losses: int = 0
