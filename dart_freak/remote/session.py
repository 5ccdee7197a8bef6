from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dart_freak.core.throws import BUST_SENTINEL, ScoredThrow, ScoreType, throws_total
from dart_freak.engine.checkout import suggest
from dart_freak.engine.state import MAX_DARTS_PER_TURN
from dart_freak.games.countdown import MAX_DART_SCORE, countdown_outcome
from dart_freak.remote.models import RemoteMatchStatus, VisitSubmission
from dart_freak.remote.relay import VisitAccepted, VisitRejected

if TYPE_CHECKING:
    import datetime

    from dart_freak.engine.checkout import Checkout
    from dart_freak.remote.models import LastVisitPayload, RemoteMatch
    from dart_freak.remote.relay import VisitOutcome, VisitRelay

logger = logging.getLogger("dart_freak.remote")


@dataclass
class RemoteCountdownSession:
    """
    Client side of a two-player remote countdown match.

    The relay owns the match. Darts are buffered only while it is the local
    player's turn; a submitted visit changes nothing locally until the
    authoritative match update comes back through ``apply_update``. Turns
    are never switched on the client.
    """

    relay: VisitRelay
    local_user_id: uuid.UUID
    match: RemoteMatch
    double_out: bool = True

    scores: dict[uuid.UUID, int] = field(default_factory=dict, init=False)
    current_throw: list[ScoredThrow] = field(default_factory=list, init=False)
    selected_dart_idx: int | None = field(default=None, init=False)
    is_saving: bool = field(default=False, init=False)
    winner_id: uuid.UUID | None = field(default=None, init=False)
    visit_log: list[LastVisitPayload] = field(default_factory=list, init=False)
    _applied: set[tuple[uuid.UUID, datetime.datetime]] = field(
        default_factory=set,
        init=False,
        repr=False,
    )
    _accepted: VisitSubmission | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.local_user_id not in self.match.participant_ids:
            raise ValueError(f"{self.local_user_id} is not a participant of {self.match.id}")
        self.scores = {pid: self.match.starting_score for pid in self.match.participant_ids}
        self.apply_update(self.match)

    # ---------- Derived values ----------

    @property
    def is_my_turn(self) -> bool:
        return (
            self.match.current_player_id == self.local_user_id
            and self.match.status is RemoteMatchStatus.IN_PROGRESS
        )

    @property
    def is_finished(self) -> bool:
        return self.match.status is not None and self.match.status.is_finished

    @property
    def my_score(self) -> int:
        return self.scores[self.local_user_id]

    @property
    def opponent_score(self) -> int:
        return self.scores[self.match.opponent_of(self.local_user_id)]

    @property
    def current_throw_total(self) -> int:
        return throws_total(self.current_throw)

    @property
    def darts_remaining(self) -> int:
        return MAX_DARTS_PER_TURN - len(self.current_throw)

    @property
    def remaining(self) -> int:
        return self.my_score - self.current_throw_total

    @property
    def is_bust(self) -> bool:
        if any(d.is_bust_marker for d in self.current_throw):
            return True
        if not self.current_throw:
            return False
        _, outcome = countdown_outcome(
            self.my_score,
            self.current_throw,
            double_out=self.double_out,
        )
        return outcome == "bust"

    @property
    def is_turn_complete(self) -> bool:
        return (
            len(self.current_throw) >= MAX_DARTS_PER_TURN
            or self.is_bust
            or self.remaining == 0
        )

    @property
    def can_bust(self) -> bool:
        if not self.is_my_turn:
            return False
        return self.remaining - self.darts_remaining * MAX_DART_SCORE <= 1

    @property
    def suggested_checkout(self) -> Checkout | None:
        if not self.is_my_turn:
            return None
        return suggest(self.remaining, self.darts_remaining)

    # ---------- Throw buffer ----------

    def record_throw(self, base_value: int, multiplier: int = 1) -> None:
        if not self.is_my_turn or self.is_saving:
            logger.debug("Not our turn; ignoring dart")
            return
        dart = ScoredThrow(base_value, ScoreType.from_multiplier(multiplier))
        selected = self.selected_dart_idx
        if selected is not None and selected < len(self.current_throw):
            self.current_throw[selected] = dart
            self.selected_dart_idx = None
            return
        if len(self.current_throw) < MAX_DARTS_PER_TURN:
            self.current_throw.append(dart)

    def select_dart(self, index: int) -> None:
        if not 0 <= index < len(self.current_throw):
            return
        self.selected_dart_idx = None if self.selected_dart_idx == index else index

    def undo_last_dart(self) -> None:
        if not self.is_my_turn:
            return
        selected = self.selected_dart_idx
        if selected is not None and selected < len(self.current_throw):
            del self.current_throw[selected]
        elif self.current_throw:
            self.current_throw.pop()
        self.selected_dart_idx = None

    def clear_throw(self) -> None:
        self.current_throw.clear()
        self.selected_dart_idx = None

    # ---------- Relay ----------

    def save_visit(self) -> VisitOutcome | None:
        """
        Submit the buffered visit.

        Returns ``None`` when there is nothing to submit. Rejections are
        returned as-is and keep the buffer for another attempt;
        ``RelayUnavailable`` propagates to the caller.
        """
        if not self.current_throw or not self.is_my_turn or self.is_saving:
            return None

        before = self.my_score
        if self.is_bust:
            after = before
        else:
            after, _ = countdown_outcome(before, self.current_throw, double_out=self.double_out)

        values = [d.total_value for d in self.current_throw if d.base_value != BUST_SENTINEL]
        values += [0] * (MAX_DARTS_PER_TURN - len(values))
        submission = VisitSubmission(
            match_id=self.match.id,
            darts=values,
            score_before=before,
            score_after=after,
        )

        self.is_saving = True
        try:
            outcome = self.relay.save_visit(submission)
        except Exception:
            self.is_saving = False
            raise

        match outcome:
            case VisitRejected(reason=reason, message=message):
                self.is_saving = False
                logger.warning(f"Visit rejected ({reason}): {message}")
            case VisitAccepted():
                # wait for the authoritative update before touching scores
                self._accepted = submission
                self.clear_throw()
        return outcome

    def apply_update(self, match: RemoteMatch) -> LastVisitPayload | None:
        """
        Apply an authoritative match snapshot.

        Each published visit is applied exactly once; returns the visit if
        this update revealed a new one. A snapshot that has moved past an
        accepted visit whose own update never arrived settles that visit
        from the submitted score.
        """
        if match.id != self.match.id:
            raise ValueError(f"Update for match {match.id}, expected {self.match.id}")
        self.match = match

        revealed: LastVisitPayload | None = None
        visit = match.last_visit_payload
        if visit is not None and (visit.player_id, visit.timestamp) not in self._applied:
            self._applied.add((visit.player_id, visit.timestamp))
            if visit.player_id in self.scores:
                self.scores[visit.player_id] = visit.score_after
            self.visit_log.append(visit)
            revealed = visit
            if visit.player_id == self.local_user_id:
                self.is_saving = False
                self._accepted = None

        if self._accepted is not None and (
            revealed is not None
            or match.current_player_id != self.local_user_id
            or self.is_finished
        ):
            # our own notification was missed; the relay accepted the visit
            logger.info(f"Applying accepted visit for match {match.id} without its update")
            self.scores[self.local_user_id] = self._accepted.score_after
            self._accepted = None
            self.is_saving = False

        if self.is_finished:
            self.is_saving = False
            self.clear_throw()
            if match.status is RemoteMatchStatus.COMPLETED and self.winner_id is None:
                self.winner_id = next(
                    (pid for pid, score in self.scores.items() if score == 0),
                    None,
                )
        return revealed
