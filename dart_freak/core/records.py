from __future__ import annotations

import datetime
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from dart_freak.core.throws import throws_total

if TYPE_CHECKING:
    from dart_freak.core.throws import ScoredThrow
    from dart_freak.core.types import TurnOutcome


@dataclass(frozen=True, slots=True)
class TurnRecord:
    """
    Closed log entry for one committed turn.

    ``score_before``/``score_after`` hold whatever the game tracks per player:
    remaining points for countdown games, accumulated points for Halve-It and
    Sudden Death, and the thrower's lives for Knockout and Killer.
    """

    player_idx: int
    player_id: uuid.UUID
    turn_number: int  # 1-based, per player
    darts: tuple[ScoredThrow, ...]
    score_before: int
    score_after: int
    outcome: TurnOutcome
    leg: int = 1
    round_index: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime.datetime = field(
        default_factory=lambda: datetime.datetime.now(datetime.UTC),
    )

    @property
    def is_bust(self) -> bool:
        return self.outcome == "bust"

    @property
    def throw_total(self) -> int:
        return throws_total(self.darts)

    @property
    def display_text(self) -> str:
        darts_text = ", ".join(d.display_text for d in self.darts) or "-"
        if self.is_bust:
            return f"{darts_text} - BUST"
        return f"{darts_text} = {self.throw_total}"


@dataclass(frozen=True, slots=True)
class RoundResult:
    """Outcome of a simultaneously resolved round (Sudden Death)."""

    round_number: int
    scores: dict[int, int]  # player_idx -> committed round total
    losers: tuple[int, ...]
    voided: bool = False
