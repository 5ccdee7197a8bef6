from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from dart_freak.core.results import MatchResult

logger = logging.getLogger("dart_freak.persistence")


class ResultSink(Protocol):
    def save_match(self, result: MatchResult) -> None: ...


@dataclass(slots=True)
class ResultPublisher:
    """
    Fire-and-forget delivery of finished matches.

    Each sink is tried on its own; a failing sink is logged and skipped so
    the other sinks and the finished in-memory match are unaffected.
    """

    sinks: list[ResultSink] = field(default_factory=list)

    def publish(self, result: MatchResult) -> int:
        """Hand ``result`` to every sink; return how many accepted it."""
        delivered = 0
        for sink in self.sinks:
            try:
                sink.save_match(result)
            except Exception:
                logger.exception(
                    f"Failed to save match {result.id} to {type(sink).__name__}",
                )
                continue
            delivered += 1
        return delivered
