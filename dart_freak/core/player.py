from __future__ import annotations

import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Player:
    """
    A participant in a match, either a local guest or a linked account.

    Identity fields never change during a match; the win/loss counters are
    only rolled forward once a match has completed.
    """

    display_name: str
    nickname: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    avatar_url: str | None = None
    is_guest: bool = True
    user_id: uuid.UUID | None = None
    total_wins: int = 0
    total_losses: int = 0

    @property
    def total_games(self) -> int:
        return self.total_wins + self.total_losses

    @property
    def win_rate(self) -> float:
        if self.total_games == 0:
            return 0.0
        return self.total_wins / self.total_games

    @property
    def match_id(self) -> uuid.UUID:
        """Id used in match results: account id when linked, else the local id."""
        return self.user_id or self.id

    @classmethod
    def create_guest(
        cls,
        display_name: str,
        nickname: str | None = None,
        avatar_url: str | None = None,
    ) -> Player:
        if nickname is None:
            nickname = display_name.lower().replace(" ", "")
        return cls(display_name=display_name, nickname=nickname, avatar_url=avatar_url)

