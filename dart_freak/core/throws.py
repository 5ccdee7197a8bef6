from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import override

BUST_SENTINEL = -1
BULL = 25

# Clockwise from the top of a standard board
BOARD_ORDER: tuple[int, ...] = (
    20, 1, 18, 4, 13, 6, 10, 15, 2, 17,
    3, 19, 7, 16, 8, 11, 14, 9, 12, 5,
)  # fmt: skip


class ScoreType(IntEnum):
    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3

    @property
    def multiplier(self) -> int:
        return int(self)

    @property
    def prefix(self) -> str:
        return {ScoreType.SINGLE: "", ScoreType.DOUBLE: "D", ScoreType.TRIPLE: "T"}[
            self
        ]

    @classmethod
    def from_multiplier(cls, multiplier: int) -> ScoreType:
        # Anything outside 2/3 is treated as a single, as the board input does
        try:
            return cls(multiplier)
        except ValueError:
            return cls.SINGLE


@dataclass(frozen=True, slots=True)
class ScoredThrow:
    """A single dart: base face value plus the ring it landed in."""

    base_value: int
    score_type: ScoreType = ScoreType.SINGLE

    @property
    def is_bust_marker(self) -> bool:
        return self.base_value == BUST_SENTINEL

    @property
    def total_value(self) -> int:
        if self.is_bust_marker:
            return 0
        return self.base_value * self.score_type.multiplier

    @property
    def is_double(self) -> bool:
        return self.score_type is ScoreType.DOUBLE and not self.is_bust_marker

    @property
    def display_text(self) -> str:
        if self.is_bust_marker:
            return "BUST"
        if self.base_value == BULL and self.score_type is ScoreType.DOUBLE:
            return "Bull"
        if self.score_type is ScoreType.SINGLE:
            return str(self.total_value)
        return f"{self.score_type.prefix}{self.base_value}"

    @override
    def __str__(self) -> str:
        return self.display_text

    @classmethod
    def of(cls, base_value: int, multiplier: int = 1) -> ScoredThrow:
        return cls(base_value, ScoreType.from_multiplier(multiplier))

    @classmethod
    def parse(cls, label: str) -> ScoredThrow:
        """
        Parse a board label such as ``T20``, ``D16``, ``S5``, ``5``, ``25``,
        ``Bull`` (double bull), ``MISS`` or ``BUST``.
        """
        text = label.strip().upper()
        if text == "BUST":
            return cls(BUST_SENTINEL)
        if text in {"MISS", "M"}:
            return cls(0)
        if text in {"BULL", "DB", "D25"}:
            return cls(BULL, ScoreType.DOUBLE)
        if text in {"SB", "OUTER"}:
            return cls(BULL)

        prefixes = {"S": ScoreType.SINGLE, "D": ScoreType.DOUBLE, "T": ScoreType.TRIPLE}
        score_type = ScoreType.SINGLE
        if text[:1] in prefixes:
            score_type = prefixes[text[0]]
            text = text[1:]

        value = int(text)
        if not (0 <= value <= 20 or value == BULL):
            raise ValueError(f"Not a dartboard value: {label!r}")
        if value == BULL and score_type is ScoreType.TRIPLE:
            raise ValueError("Bull has no treble ring")
        return cls(value, score_type)


def throws_total(darts: list[ScoredThrow] | tuple[ScoredThrow, ...]) -> int:
    return sum(d.total_value for d in darts)
