from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dart_freak.core.throws import ScoredThrow
    from dart_freak.engine.game_engine import GameEngine


class Agent:
    """
    Base automated thrower.

    Hits exactly where the active rules say to aim, which makes it the
    reference agent for deterministic tests.
    """

    def choose_throw(self, engine: GameEngine) -> ScoredThrow:
        return engine.rules.suggest_aim(engine)
