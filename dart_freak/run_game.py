import random

from dart_freak.ai.smart_agent import SmartAgent
from dart_freak.core.player import Player
from dart_freak.engine.game_engine import build_engine
from dart_freak.engine.logging import configure_logging
from dart_freak.simulation.config import MatchConfig

if __name__ == "__main__":
    configure_logging()

    roster = [Player.create_guest(n) for n in ("Phil", "Michael", "Luke")]
    config = MatchConfig(game="Killer", players=[p.display_name for p in roster])
    eng = build_engine(config, roster, seed=1)

    eng.run_match(SmartAgent(rng=random.Random(1), accuracy=0.5))
