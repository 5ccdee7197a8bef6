from __future__ import annotations

import datetime
import uuid
from typing import TYPE_CHECKING

from dart_freak.core.results import MatchDart, MatchPlayer, MatchResult, MatchTurn

if TYPE_CHECKING:
    from dart_freak.core.records import TurnRecord
    from dart_freak.engine.game_engine import GameEngine
    from dart_freak.engine.state import PlayerState


def _match_turn(engine: GameEngine, record: TurnRecord) -> MatchTurn:
    # Per-dart outcomes are only tracked by games that resolve dart by dart
    dart_outcomes: list[tuple[str, tuple[uuid.UUID, ...]]] = record.metadata.get(
        "dart_outcomes",
        [],
    )
    darts: list[MatchDart] = []
    for i, dart in enumerate(record.darts):
        outcome, affected = (
            dart_outcomes[i] if i < len(dart_outcomes) else (None, ())
        )
        darts.append(
            MatchDart(
                base_value=dart.base_value,
                multiplier=dart.score_type.multiplier,
                outcome=outcome,
                affected_player_ids=list(affected),
            ),
        )
    return MatchTurn(
        turn_number=record.turn_number,
        darts=darts,
        score_before=record.score_before,
        score_after=record.score_after,
        is_bust=record.is_bust,
        outcome=record.outcome,
        leg=record.leg,
        target_display=engine.rules.target_display(record),
    )


def _match_player(engine: GameEngine, player: PlayerState) -> MatchPlayer:
    turns = engine.state.turns_for(player.idx)
    return MatchPlayer(
        id=player.player.match_id,
        display_name=player.player.display_name,
        nickname=player.player.nickname,
        is_guest=player.player.is_guest,
        final_score=engine.rules.final_score(player),
        starting_score=engine.rules.starting_value,
        total_darts_thrown=sum(
            1 for t in turns for d in t.darts if not d.is_bust_marker
        ),
        turn_count=len(turns),
        turns=[_match_turn(engine, t) for t in turns],
        legs_won=player.legs_won,
        avatar_url=player.player.avatar_url,
    )


def build_match_result(engine: GameEngine) -> MatchResult:
    """Snapshot a finished match into its persisted form."""
    state = engine.state
    winner = state.winner
    if winner is None:
        raise ValueError("Cannot build a result for a match without a winner")
    return MatchResult(
        id=uuid.uuid4(),
        game_type=engine.rules.game_type,
        players=[_match_player(engine, p) for p in state.players],
        winner_id=winner.player.match_id,
        started_at=state.started_at,
        ended_at=state.ended_at or datetime.datetime.now(datetime.UTC),
        match_format=engine.rules.match_format,
        total_legs_played=state.current_leg,
        metadata=engine.rules.metadata(engine),
    )
