from __future__ import annotations

import logging
import re
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, get_args, override

from rich.logging import RichHandler

from dart_freak.core.types import TurnOutcome

if TYPE_CHECKING:
    from dart_freak.engine.state import LogContext

LOGGER_NAME = "dart_freak"
ENGINE_LOGGER_NAME = f"{LOGGER_NAME}.engine"

OUTCOME_NAMES = set(get_args(TurnOutcome))

# Precompiled regex patterns for highlighting
OUTCOME_PATTERN = re.compile(rf"\b({'|'.join(map(re.escape, OUTCOME_NAMES))})\b")
DART_PATTERN = re.compile(r"(?<![\w\[])([DT](?:[1-9]|1\d|20|25)|Bull)\b")
LIFE_PATTERN = re.compile(r"-\d+ life\b")


# Simple color theme for Rich
COLOR = {
    "score": "bold green",
    "bust": "bold red",
    "warning": "bold red",
    "outcome": "bold blue",
    "dart": "yellow",
    "killer": "bold magenta",
    "prefix": "dim",
}


class ContextAdapter(logging.LoggerAdapter):
    """
    Stamp every record with the owning engine's runtime context.

    All engines share the ``dart_freak.engine`` logger; the adapter lives on
    its engine, so no logger keeps a finished engine reachable.
    """

    def __init__(self, logger: logging.Logger, context: LogContext) -> None:
        super().__init__(logger)
        self.context: LogContext = context

    @override
    def process(
        self,
        msg: Any,
        kwargs: MutableMapping[str, Any],
    ) -> tuple[Any, MutableMapping[str, Any]]:
        logctx = self.context
        kwargs["extra"] = {
            "total_turn": logctx.total_turn,
            "turn_log_count": logctx.turn_log_count,
            "player_repr": logctx.current_player_repr,
            "engine_id": logctx.engine_id,
            "leg": logctx.leg,
        }
        logctx.inc_log_count()
        return msg, kwargs


class RichMarkupFormatter(logging.Formatter):
    @override
    def format(self, record: logging.LogRecord) -> str:
        total_turn = getattr(record, "total_turn", 0)
        turn_log_count = getattr(record, "turn_log_count", 0)
        player_repr = getattr(record, "player_repr", "_")
        engine_id = getattr(record, "engine_id", 0)
        leg = getattr(record, "leg", 1)
        prefix = f"{engine_id}:L{leg} {total_turn}.{player_repr}.{turn_log_count}"

        styled = record.getMessage()

        styled = re.sub(r"\bBUST\b", f"[{COLOR['bust']}]BUST[/{COLOR['bust']}]", styled)
        styled = re.sub(
            r"\bCHECKOUT\b",
            f"[{COLOR['score']}]CHECKOUT[/{COLOR['score']}]",
            styled,
        )
        styled = re.sub(r"\b180\b", f"[{COLOR['score']}]180[/{COLOR['score']}]", styled)
        styled = re.sub(
            r"\bKiller\b",
            f"[{COLOR['killer']}]Killer[/{COLOR['killer']}]",
            styled,
        )
        styled = LIFE_PATTERN.sub(rf"[{COLOR['bust']}]\g<0>[/{COLOR['bust']}]", styled)
        styled = OUTCOME_PATTERN.sub(
            rf"[{COLOR['outcome']}]\1[/{COLOR['outcome']}]",
            styled,
        )
        styled = DART_PATTERN.sub(rf"[{COLOR['dart']}]\1[/{COLOR['dart']}]", styled)

        # !!!
        styled = re.sub(r"!!!", f"[{COLOR['warning']}]!!![/{COLOR['warning']}]", styled)

        if record.levelno >= logging.WARNING:
            styled = f"[{COLOR['warning']}]{styled}[/{COLOR['warning']}]"

        return f"[{COLOR['prefix']}]{prefix}[/{COLOR['prefix']}]  {styled}"


def configure_logging(level: int = logging.INFO) -> None:
    logger = logging.getLogger()
    logger.setLevel(level)
    handler = RichHandler(markup=True, show_path=False, show_time=False)
    handler.setFormatter(RichMarkupFormatter())
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False
