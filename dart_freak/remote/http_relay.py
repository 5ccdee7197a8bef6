"""
Thin HTTP client for the hosted save-visit function.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any

import msgspec
import requests

from dart_freak.remote.models import VisitSubmission
from dart_freak.remote.relay import (
    RelayRejection,
    RelayUnavailable,
    VisitAccepted,
    VisitOutcome,
    VisitRejected,
)

logger = logging.getLogger("dart_freak.remote")


class HttpVisitRelay:
    """Posts visits to ``<base_url>/save-visit`` with a bearer token."""

    def __init__(
        self,
        base_url: str,
        access_token: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self._headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    def save_visit(self, submission: VisitSubmission) -> VisitOutcome:
        url = f"{self.base_url}/save-visit"
        try:
            r = self.session.post(
                url,
                data=msgspec.json.encode(submission),
                headers=self._headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise RelayUnavailable(f"save-visit unreachable: {e}") from e

        body = self._json(r)
        if r.ok:
            data = body.get("data") or {}
            next_player = data.get("next_player_id")
            return VisitAccepted(
                match_id=submission.match_id,
                next_player_id=uuid.UUID(next_player) if next_player else None,
            )

        message = str(body.get("error", r.reason))
        rejection = RelayRejection.from_response(r.status_code, message)
        if rejection is None:
            raise RelayUnavailable(f"save-visit failed with HTTP {r.status_code}: {message}")
        logger.info(f"Visit for match {submission.match_id} rejected: {rejection} ({message})")
        return VisitRejected(rejection, message)

    @staticmethod
    def _json(r: requests.Response) -> dict[str, Any]:
        try:
            body = r.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
