"""Database manager for persisting finished matches."""

import logging
import uuid

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine, select

from dart_freak.core.player import Player
from dart_freak.core.results import MatchResult
from dart_freak.persistence.db_models import MatchPlayerRow, MatchRow, PlayerRow

logger = logging.getLogger("dart_freak.db")


class MatchDatabase:
    """
    SQL-backed result sink.

    Stores each finished match once, with one row per participant, and rolls
    the players' win/loss counters forward. Defaults to in-memory SQLite.
    """

    def __init__(self, url: str = "sqlite://"):
        self.url = url
        self.engine: Engine = self._create_engine(url)
        SQLModel.metadata.create_all(self.engine)

    @staticmethod
    def _create_engine(url: str) -> Engine:
        if url in {"sqlite://", "sqlite:///:memory:"}:
            # one shared connection, or every session sees an empty database
            return create_engine(
                url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url)

    def save_match(self, result: MatchResult) -> None:
        """Persist a finished match and update player aggregates."""
        with Session(self.engine) as session:
            if session.get(MatchRow, result.id) is not None:
                logger.info(f"Match {result.id} already stored; skipping")
                return

            session.add(
                MatchRow(
                    id=result.id,
                    game_type=result.game_type,
                    winner_id=result.winner_id,
                    started_at=result.started_at,
                    ended_at=result.ended_at,
                    duration_s=result.duration.total_seconds(),
                    match_format=result.match_format,
                    total_legs_played=result.total_legs_played,
                    player_count=len(result.players),
                    payload=result.to_json().decode(),
                ),
            )

            for seat, mp in enumerate(result.players):
                won = mp.id == result.winner_id
                session.add(
                    MatchPlayerRow(
                        match_id=result.id,
                        player_id=mp.id,
                        seat=seat,
                        display_name=mp.display_name,
                        final_score=mp.final_score,
                        starting_score=mp.starting_score,
                        total_darts_thrown=mp.total_darts_thrown,
                        turn_count=mp.turn_count,
                        legs_won=mp.legs_won,
                        won=won,
                    ),
                )

                player = session.get(PlayerRow, mp.id)
                if player is None:
                    player = PlayerRow(
                        id=mp.id,
                        display_name=mp.display_name,
                        nickname=mp.nickname,
                        is_guest=mp.is_guest,
                        avatar_url=mp.avatar_url,
                    )
                if won:
                    player.total_wins += 1
                else:
                    player.total_losses += 1
                session.add(player)

            session.commit()
        logger.debug(f"Stored match {result.id} ({result.game_type})")

    def get_known_match_ids(self) -> set[uuid.UUID]:
        """Return the ids of all matches already present in the DB."""
        with Session(self.engine) as session:
            return set(session.exec(select(MatchRow.id)).all())

    def load_match(self, match_id: uuid.UUID) -> MatchResult | None:
        with Session(self.engine) as session:
            row = session.get(MatchRow, match_id)
            if row is None:
                return None
            return MatchResult.from_json(row.payload)

    def get_player(self, player_id: uuid.UUID) -> Player | None:
        """Player with up-to-date win/loss counters, if they ever played."""
        with Session(self.engine) as session:
            row = session.get(PlayerRow, player_id)
            if row is None:
                return None
            return Player(
                display_name=row.display_name,
                nickname=row.nickname,
                id=row.id,
                avatar_url=row.avatar_url,
                is_guest=row.is_guest,
                user_id=None if row.is_guest else row.id,
                total_wins=row.total_wins,
                total_losses=row.total_losses,
            )

    def match_count(self, game_type: str | None = None) -> int:
        with Session(self.engine) as session:
            statement = select(MatchRow.id)
            if game_type is not None:
                statement = statement.where(MatchRow.game_type == game_type)
            return len(session.exec(statement).all())
