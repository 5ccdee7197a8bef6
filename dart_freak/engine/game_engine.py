from __future__ import annotations

import datetime
import logging
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dart_freak.core.records import TurnRecord
from dart_freak.core.throws import ScoredThrow, ScoreType, throws_total
from dart_freak.engine import ENGINE_ID_COUNTER
from dart_freak.engine.logging import ENGINE_LOGGER_NAME, ContextAdapter
from dart_freak.engine.pacing import Pacing
from dart_freak.engine.results import build_match_result
from dart_freak.engine.state import (
    MAX_DARTS_PER_TURN,
    LogContext,
    MatchState,
    PlayerState,
)

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from dart_freak.core.agent import Agent
    from dart_freak.core.player import Player
    from dart_freak.core.results import MatchResult
    from dart_freak.core.rules_base import GameRules, TurnResolution
    from dart_freak.engine.checkout import Checkout
    from dart_freak.persistence.publisher import ResultPublisher
    from dart_freak.simulation.config import MatchConfig
    from dart_freak.simulation.telemetry import MatchListener


@dataclass
class GameEngine:
    """
    Generic turn sequencer shared by every game mode.

    The engine owns the throw buffer, the turn history and the order of
    play; the plugged-in ``rules`` decide what a committed turn means.
    """

    state: MatchState
    rules: GameRules
    rng: random.Random
    log_context: LogContext
    listeners: list[MatchListener] = field(default_factory=list)
    pacing: Pacing = field(default_factory=Pacing)
    publisher: ResultPublisher | None = None
    result: MatchResult | None = field(default=None, init=False)
    _logger: ContextAdapter = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = ContextAdapter(
            logging.getLogger(ENGINE_LOGGER_NAME),
            self.log_context,
        )
        self.rules.setup(self)
        self._begin_turn()

    # ---------- Logging ----------

    def log_info(self, msg: str) -> None:
        self._logger.info(msg)

    def log_debug(self, msg: str) -> None:
        self._logger.debug(msg)

    def log_warning(self, msg: str) -> None:
        self._logger.warning(msg)

    # ---------- Derived display values ----------

    @property
    def current_player(self) -> PlayerState:
        return self.state.current_player

    @property
    def current_score(self) -> int:
        return self.state.current_player.score

    @property
    def current_throw_total(self) -> int:
        return throws_total(self.state.current_throw)

    @property
    def darts_remaining(self) -> int:
        return MAX_DARTS_PER_TURN - len(self.state.current_throw)

    @property
    def is_turn_complete(self) -> bool:
        return self.rules.is_turn_complete(self)

    @property
    def suggested_checkout(self) -> Checkout | None:
        if self.state.finished:
            return None
        return self.rules.suggested_checkout(self)

    # ---------- Throw buffer ----------

    def record_throw(self, base_value: int, multiplier: int = 1) -> None:
        if self.state.finished:
            self.log_debug("Match finished; ignoring dart")
            return

        dart = ScoredThrow(base_value, ScoreType.from_multiplier(multiplier))
        if dart.is_bust_marker and self.rules.bust_marker_ends_turn:
            player = self.state.current_player
            self.log_info(f"{player.repr} declares BUST")
            self._commit(
                player,
                tuple(self.state.current_throw),
                self.rules.bust(self, player),
            )
            return

        buffer = self.state.current_throw
        selected = self.state.selected_dart_idx
        if selected is not None and selected < len(buffer):
            self.log_debug(f"Replacing dart {selected + 1}: {buffer[selected]} -> {dart}")
            buffer[selected] = dart
            self.state.selected_dart_idx = None
            return

        if len(buffer) >= MAX_DARTS_PER_TURN:
            self.log_debug(f"Buffer full; ignoring {dart}")
            return
        buffer.append(dart)
        self.log_debug(f"Dart {len(buffer)}: {dart}")

    def select_dart(self, index: int) -> None:
        if not 0 <= index < len(self.state.current_throw):
            return
        if self.state.selected_dart_idx == index:
            self.state.selected_dart_idx = None
        else:
            self.state.selected_dart_idx = index

    def deselect_dart(self) -> None:
        self.state.selected_dart_idx = None

    def undo_last_dart(self) -> None:
        buffer = self.state.current_throw
        selected = self.state.selected_dart_idx
        if selected is not None and selected < len(buffer):
            del buffer[selected]
        elif buffer:
            buffer.pop()
        self.state.selected_dart_idx = None

    def clear_throw(self) -> None:
        self.state.current_throw.clear()
        self.state.selected_dart_idx = None

    # ---------- Turn commit ----------

    def save_turn(self) -> TurnRecord | None:
        """Commit the buffered darts as the current player's turn."""
        if self.state.finished:
            self.log_debug("Match finished; nothing to save")
            return None
        darts = tuple(self.state.current_throw)
        if not darts and not self.rules.allows_empty_turn:
            self.log_debug("No darts thrown; nothing to save")
            return None

        player = self.state.current_player
        resolution = self.rules.resolve_turn(self, player, darts)
        return self._commit(player, darts, resolution)

    def _commit(
        self,
        player: PlayerState,
        darts: tuple[ScoredThrow, ...],
        resolution: TurnResolution,
    ) -> TurnRecord:
        state = self.state
        record = TurnRecord(
            player_idx=player.idx,
            player_id=player.player.match_id,
            turn_number=len(state.turns_for(player.idx)) + 1,
            darts=darts,
            score_before=resolution.score_before,
            score_after=resolution.score_after,
            outcome=resolution.outcome,
            leg=state.current_leg,
            round_index=state.round_index,
            metadata=resolution.metadata,
        )
        state.turn_history.append(record)
        state.last_turn = record
        self.clear_throw()
        self.log_info(f"{player.repr} {record.display_text} ({record.outcome})")
        for listener in self.listeners:
            listener.on_turn_saved(self, record)

        winner_idx = resolution.winner_idx
        if winner_idx is None:
            winner_idx = self.rules.check_winner(self)
        if winner_idx is not None:
            self._finish(winner_idx)
            return record

        if resolution.leg_won:
            self.rules.start_next_leg(self)
            self.log_context.leg = state.current_leg
            self._begin_turn()
            return record

        self.pacing.pause()
        self.rules.advance(self)
        winner_idx = self.rules.check_winner(self)
        if winner_idx is not None:
            self._finish(winner_idx)
        else:
            self._begin_turn()
        return record

    def undo_last_turn(self) -> bool:
        """Revert the most recent committed turn; single level only."""
        state = self.state
        if not self.rules.supports_undo or state.finished or state.last_turn is None:
            self.log_debug("Nothing to undo")
            return False

        record = state.last_turn
        self.rules.revert_turn(self, record)
        if state.turn_history and state.turn_history[-1] is record:
            state.turn_history.pop()
        state.current_player_idx = record.player_idx
        state.last_turn = None
        self.clear_throw()
        self.log_info(f"{state.current_player.repr} turn undone")
        self._begin_turn()
        return True

    # ---------- Turn order ----------

    def advance_to_next_active(self) -> None:
        players = self.state.players
        n = len(players)
        for _ in range(n):
            self.state.current_player_idx = (self.state.current_player_idx + 1) % n
            if players[self.state.current_player_idx].active:
                break

    def _begin_turn(self) -> None:
        self.log_context.new_turn(self.state.current_player.repr)

    def _finish(self, winner_idx: int) -> None:
        state = self.state
        state.winner_idx = winner_idx
        state.finished = True
        state.ended_at = datetime.datetime.now(datetime.UTC)
        self.log_info(f"{state.players[winner_idx].repr} wins the match!!!")

        self.result = build_match_result(self)
        for listener in self.listeners:
            listener.on_match_finished(self, self.result)
        if self.publisher is not None:
            self.publisher.publish(self.result)

    # ---------- Automated play ----------

    def run_turn(self, agent: Agent) -> None:
        """Let ``agent`` throw for the current player and commit the turn."""
        if self.state.finished:
            return
        thrower_idx = self.state.current_player_idx
        turns_before = len(self.state.turn_history)
        while not self.is_turn_complete:
            dart = agent.choose_throw(self)
            self.record_throw(dart.base_value, dart.score_type.multiplier)
            if len(self.state.turn_history) != turns_before:
                # the bust marker already committed the turn
                return
        if not self.state.finished and self.state.current_player_idx == thrower_idx:
            self.save_turn()

    def run_match(self, agent: Agent, max_turns: int = 1000) -> bool:
        turns = 0
        while not self.state.finished and turns < max_turns:
            self.run_turn(agent)
            turns += 1
        if not self.state.finished:
            self.log_warning(f"Match still open after {max_turns} turns!!!")
        return self.state.finished


def build_engine(
    config: MatchConfig,
    players: Sequence[Player],
    *,
    seed: int | None = None,
    listeners: Iterable[MatchListener] = (),
    publisher: ResultPublisher | None = None,
    pacing: Pacing | None = None,
) -> GameEngine:
    """Compose a ready-to-play engine for the configured game."""
    from dart_freak.games import RULES_CLASSES

    try:
        rules_cls = RULES_CLASSES[config.game]
    except KeyError:
        raise ValueError(f"Unknown game: {config.game!r}") from None

    rng = random.Random(seed)
    roster = list(players)
    if config.shuffle_order:
        rng.shuffle(roster)

    return GameEngine(
        MatchState([PlayerState(i, p) for i, p in enumerate(roster)]),
        rules_cls.from_config(config),
        rng,
        log_context=LogContext(engine_id=next(ENGINE_ID_COUNTER)),
        listeners=list(listeners),
        pacing=pacing if pacing is not None else Pacing(config.reveal_delay),
        publisher=publisher,
    )
