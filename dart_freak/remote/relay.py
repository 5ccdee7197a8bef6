from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from dart_freak.remote.models import VisitSubmission


class RelayRejection(StrEnum):
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    NOT_YOUR_TURN = "not_your_turn"
    MATCH_NOT_ACTIVE = "match_not_active"

    @classmethod
    def from_response(cls, status_code: int, message: str) -> RelayRejection | None:
        """Classify a relay error response; ``None`` if it is not a rejection."""
        match status_code:
            case 401:
                return cls.UNAUTHORIZED
            case 404:
                return cls.NOT_FOUND
            case 403 if "turn" in message.lower():
                return cls.NOT_YOUR_TURN
            case 403:
                return cls.UNAUTHORIZED
            case 400 if "not in progress" in message.lower():
                return cls.MATCH_NOT_ACTIVE
            case _:
                return None


@dataclass(frozen=True, slots=True)
class VisitAccepted:
    match_id: uuid.UUID
    next_player_id: uuid.UUID | None = None


@dataclass(frozen=True, slots=True)
class VisitRejected:
    reason: RelayRejection
    message: str = ""


type VisitOutcome = VisitAccepted | VisitRejected


class RelayUnavailable(Exception):
    """The relay could not be reached or answered outside its contract."""


class VisitRelay(Protocol):
    def save_visit(self, submission: VisitSubmission) -> VisitOutcome:
        """
        Submit a visit.

        Rejections come back as ``VisitRejected``; transport failures raise
        ``RelayUnavailable``.
        """
        ...
