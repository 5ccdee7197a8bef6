import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(slots=True)
class Pacing:
    """
    Delay between committing a turn and revealing the next player.

    Purely cosmetic: state is fully committed before ``pause`` runs, so a
    zero delay (the default, used headless and in tests) changes nothing.
    """

    delay: float = 0.0
    sleep: Callable[[float], None] = field(default=time.sleep)

    def pause(self) -> None:
        if self.delay > 0:
            self.sleep(self.delay)
