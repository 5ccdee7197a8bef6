from typing import Callable

import pytest

from dart_freak.core.player import Player
from tests.test_utils import MatchScenario


@pytest.fixture
def scenario() -> Callable[..., MatchScenario]:
    """Factory fixture to create scenarios."""

    def _builder(rules, players=2, **kwargs) -> MatchScenario:
        return MatchScenario(rules, players, **kwargs)

    return _builder


@pytest.fixture
def roster() -> list[Player]:
    return [Player.create_guest(n) for n in ("Phil", "Michael", "Luke")]
