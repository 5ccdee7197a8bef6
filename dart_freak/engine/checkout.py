"""
Checkout advisor: darts-minimal finishing routes for countdown games.

The table is built once at import time and covers every score from 2 to 170
that can be finished in three darts or fewer, always ending on a double or
the bull. Scores that cannot be checked out (the "bogey" numbers 159, 162,
163, 165, 166, 168 and 169) have no entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import override

from dart_freak.core.throws import ScoredThrow

MIN_CHECKOUT = 2
MAX_CHECKOUT = 170
SEPARATOR = " → "

# Finishing doubles in order of preference; the bull is the last resort
PREFERRED_DOUBLES: tuple[int, ...] = (
    20, 16, 18, 12, 10, 8, 19, 17, 14, 15, 13, 11, 9, 6, 4, 7, 5, 3, 2, 1,
)  # fmt: skip
TREBLE_ORDER: tuple[int, ...] = tuple(range(20, 0, -1))


@dataclass(frozen=True, slots=True)
class Checkout:
    darts: tuple[str, ...]

    @property
    def dart_count(self) -> int:
        return len(self.darts)

    @property
    def throws(self) -> tuple[ScoredThrow, ...]:
        return tuple(ScoredThrow.parse(label) for label in self.darts)

    @property
    def total(self) -> int:
        return sum(t.total_value for t in self.throws)

    @override
    def __str__(self) -> str:
        return SEPARATOR.join(self.darts)


def _finishes() -> list[tuple[str, int]]:
    finishes = [(f"D{n}", n * 2) for n in PREFERRED_DOUBLES]
    finishes.append(("Bull", 50))
    return finishes


FINISHES = _finishes()


def _one_dart(score: int) -> tuple[str, ...] | None:
    for label, value in FINISHES:
        if value == score:
            return (label,)
    return None


def _setup_candidates(score: int) -> list[str]:
    """Every single-dart label worth exactly ``score``, most natural first."""
    labels: list[str] = []
    if 1 <= score <= 20:
        labels.append(str(score))
    if score % 3 == 0 and 1 <= score // 3 <= 20:
        labels.append(f"T{score // 3}")
    if score == 25:
        labels.append("25")
    if score == 50:
        labels.append("Bull")
    if score % 2 == 0 and 1 <= score // 2 <= 20:
        labels.append(f"D{score // 2}")
    return labels


def _two_dart(score: int) -> tuple[str, ...] | None:
    # Prefer a plain single set-up, then any set-up, onto the best double
    for singles_only in (True, False):
        for label, value in FINISHES:
            candidates = _setup_candidates(score - value)
            if singles_only:
                candidates = [c for c in candidates if c.isdigit() and c != "25"]
            if candidates:
                return (candidates[0], label)
    return None


def _three_dart(score: int) -> tuple[str, ...] | None:
    openers = [(f"T{n}", n * 3) for n in TREBLE_ORDER]
    openers += [("Bull", 50), ("25", 25)]
    openers += [(str(n), n) for n in TREBLE_ORDER]
    for label, value in openers:
        rest = score - value
        if rest < MIN_CHECKOUT:
            continue
        tail = _one_dart(rest) or _two_dart(rest)
        if tail is not None:
            return (label, *tail)
    return None


def _build_table() -> dict[int, Checkout]:
    table: dict[int, Checkout] = {}
    for score in range(MIN_CHECKOUT, MAX_CHECKOUT + 1):
        route = _one_dart(score) or _two_dart(score) or _three_dart(score)
        if route is not None:
            table[score] = Checkout(route)
    return table


CHECKOUT_TABLE: dict[int, Checkout] = _build_table()


def suggest(remaining: int, darts_available: int) -> Checkout | None:
    """
    Suggest a finishing route for ``remaining`` with the darts left.

    Returns ``None`` when the score is outside 2-170, is a bogey number, or
    needs more darts than are available.
    """
    if not (MIN_CHECKOUT <= remaining <= MAX_CHECKOUT) or darts_available <= 0:
        return None
    checkout = CHECKOUT_TABLE.get(remaining)
    if checkout is None or checkout.dart_count > darts_available:
        return None
    return checkout
