"""Command-line interface for batch match simulations."""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import cappa
from tqdm import tqdm

from dart_freak.core.player import Player
from dart_freak.engine.logging import LOGGER_NAME
from dart_freak.persistence.db_manager import MatchDatabase
from dart_freak.persistence.publisher import ResultPublisher
from dart_freak.simulation.config import SimulationConfig
from dart_freak.simulation.runner import run_single_simulation
from dart_freak.simulation.telemetry import MetricsAggregator

# Suppress game engine logs at module level
logging.getLogger(LOGGER_NAME).setLevel(logging.CRITICAL)


@dataclass
class Args:
    """CLI arguments for the simulation runner."""

    config: Path | None = None
    """Path to TOML configuration file (defaults apply when omitted)"""

    runs: int | None = None
    """Override: number of matches to simulate"""

    max_turns: int | None = None
    """Override: abort matches exceeding this many turns"""

    seed_offset: int | None = None
    """Override: starting seed value"""

    database: str | None = None
    """Override: SQLAlchemy URL for storing finished matches"""

    def __call__(self) -> int:
        """Execute batch simulations with progress tracking."""
        if self.config is not None and not self.config.exists():
            print(f"Error: Config file not found: {self.config}", file=sys.stderr)
            return 1

        config = (
            SimulationConfig.from_toml(self.config) if self.config else SimulationConfig()
        )

        # CLI overrides
        runs = self.runs or config.runs
        if self.max_turns is not None:
            config.max_turns_per_match = self.max_turns
        seed_offset = self.seed_offset if self.seed_offset is not None else config.seed

        try:
            db = MatchDatabase(self.database or config.database_url)
        except Exception as e:
            print(f"Error: Cannot open database: {e}", file=sys.stderr)
            return 1

        players = [Player.create_guest(name) for name in config.match.players]
        metrics = MetricsAggregator()
        publisher = ResultPublisher([db])

        print(f"Game: {config.match.game}")
        print(f"Players: {', '.join(config.match.players)}")
        print(f"Runs: {runs}")
        print()

        completed = 0
        aborted = 0

        with tqdm(total=runs, desc="Simulating", unit="match") as pbar:
            for seed in range(seed_offset, seed_offset + runs):
                try:
                    sim = run_single_simulation(
                        config,
                        players,
                        seed,
                        metrics=metrics,
                        publisher=publisher,
                    )
                except ValueError as e:
                    print(f"Error: {e}", file=sys.stderr)
                    return 1

                if sim.aborted or sim.result is None:
                    aborted += 1
                    status = "ABORTED"
                    winner = "-"
                else:
                    completed += 1
                    status = "COMPLETED"
                    winner_player = sim.result.winner
                    winner = winner_player.display_name if winner_player else "-"

                tqdm.write(
                    f"[seed {seed}] {status} in {sim.execution_time_ms:.2f}ms "
                    f"({sim.turn_count} turns, winner: {winner})",
                )
                pbar.update(1)

        print()
        for stats in metrics.stats.values():
            print(
                f"  {stats.name}: wins={stats.wins}, "
                f"avg={stats.three_dart_average:.1f}, "
                f"busts={stats.busts}, 180s={stats.max_visits}, "
                f"best={stats.best_visit}",
            )

        print(f"\nCompleted: {completed}")
        print(f"Aborted:   {aborted}")
        print(f"Total DB Size: {db.match_count()} matches")

        return 0


def main():
    """Entry point for CLI."""
    return cappa.invoke(Args)


if __name__ == "__main__":
    sys.exit(main())
