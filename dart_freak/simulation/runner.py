from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dart_freak.ai.smart_agent import SmartAgent
from dart_freak.engine.game_engine import build_engine

if TYPE_CHECKING:
    from dart_freak.core.player import Player
    from dart_freak.core.results import MatchResult
    from dart_freak.persistence.publisher import ResultPublisher
    from dart_freak.simulation.config import SimulationConfig
    from dart_freak.simulation.telemetry import MetricsAggregator


@dataclass(frozen=True, slots=True)
class SimulationResult:
    seed: int
    aborted: bool
    turn_count: int
    execution_time_ms: float
    result: MatchResult | None


def run_single_simulation(
    config: SimulationConfig,
    players: list[Player],
    seed: int,
    *,
    metrics: MetricsAggregator | None = None,
    publisher: ResultPublisher | None = None,
) -> SimulationResult:
    """Play one match with simulated throwers; deterministic for a seed."""
    start = time.perf_counter()
    engine = build_engine(
        config.match,
        players,
        seed=seed,
        listeners=[metrics] if metrics is not None else [],
        publisher=publisher,
    )
    agent = SmartAgent(rng=random.Random(seed), accuracy=config.accuracy)
    finished = engine.run_match(agent, max_turns=config.max_turns_per_match)
    return SimulationResult(
        seed=seed,
        aborted=not finished,
        turn_count=len(engine.state.turn_history),
        execution_time_ms=(time.perf_counter() - start) * 1000,
        result=engine.result,
    )
