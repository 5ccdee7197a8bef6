"""Configuration schema for matches and batch simulations using msgspec."""

from __future__ import annotations

from pathlib import Path

import msgspec

from dart_freak.core.types import GameName, HalveItDifficulty


class MatchConfig(msgspec.Struct):
    """
    Settings for one match.

    Only the fields relevant to ``game`` are read; the rest keep their
    defaults.
    """

    game: GameName = "Countdown"
    players: list[str] = msgspec.field(default_factory=lambda: ["Player 1", "Player 2"])
    shuffle_order: bool = False

    # Countdown
    starting_score: int = 301
    match_format: int = 1
    double_out: bool = False

    # Knockout / Killer / Sudden Death
    starting_lives: int = 3
    two_player_tie_replays: bool = True
    hold_back_display: bool = True

    # Halve-It; explicit targets such as ["20", "D16", "T19", "BULL"]
    difficulty: HalveItDifficulty = "easy"
    targets: list[str] | None = None

    # Seconds between committing a turn and revealing the next player
    reveal_delay: float = 0.0


class SimulationConfig(msgspec.Struct):
    """TOML-backed configuration for batch match simulations."""

    match: MatchConfig = msgspec.field(default_factory=MatchConfig)

    # Execution limits
    runs: int = 100
    max_turns_per_match: int = 1000
    seed: int = 0

    # Chance a simulated dart lands where it was aimed
    accuracy: float = 0.6

    database_url: str = "sqlite://"

    @classmethod
    def from_toml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a TOML file path."""
        with Path(path).open("rb") as f:
            return msgspec.toml.decode(f.read(), type=cls)
