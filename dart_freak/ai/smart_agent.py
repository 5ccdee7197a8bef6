from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, override

from dart_freak.core.agent import Agent
from dart_freak.core.throws import BOARD_ORDER, BULL, ScoredThrow, ScoreType

if TYPE_CHECKING:
    from dart_freak.engine.game_engine import GameEngine


@dataclass
class SmartAgent(Agent):
    """
    Aims where the rules suggest, then scatters like a human thrower.

    ``accuracy`` is the chance of landing the intended segment and ring.
    A miss drifts to a neighbouring segment and/or the single ring.
    """

    rng: random.Random = field(default_factory=random.Random)
    accuracy: float = 0.6

    @override
    def choose_throw(self, engine: GameEngine) -> ScoredThrow:
        aim = super().choose_throw(engine)
        if self.rng.random() < self.accuracy:
            return aim
        return self._scatter(aim)

    def _scatter(self, aim: ScoredThrow) -> ScoredThrow:
        if aim.base_value == BULL:
            if self.rng.random() < 0.5:
                return ScoredThrow(BULL)
            return ScoredThrow(self.rng.choice(BOARD_ORDER))

        if aim.base_value not in BOARD_ORDER:
            return aim

        base = aim.base_value
        if self.rng.random() < 0.5:
            pos = BOARD_ORDER.index(base)
            step = self.rng.choice((-1, 1))
            base = BOARD_ORDER[(pos + step) % len(BOARD_ORDER)]

        roll = self.rng.random()
        if aim.score_type is ScoreType.SINGLE:
            score_type = ScoreType.TRIPLE if roll < 0.05 else ScoreType.SINGLE
        elif aim.score_type is ScoreType.DOUBLE and roll < 0.4:
            # wide of a double leaves the board
            return ScoredThrow(0)
        else:
            score_type = aim.score_type if roll < 0.2 else ScoreType.SINGLE
        return ScoredThrow(base, score_type)
