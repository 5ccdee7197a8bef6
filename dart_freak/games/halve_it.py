from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Self, override

from dart_freak.core.rules_base import GameRules, TurnResolution
from dart_freak.core.throws import BULL, ScoredThrow, ScoreType
from dart_freak.engine.state import MAX_DARTS_PER_TURN

if TYPE_CHECKING:
    from dart_freak.core.records import TurnRecord
    from dart_freak.core.types import GameName, HalveItDifficulty, HalveItTargetKind
    from dart_freak.engine.game_engine import GameEngine
    from dart_freak.engine.state import PlayerState
    from dart_freak.simulation.config import MatchConfig

RANDOM_TARGETS = 5

# Out of 10: single / double / triple
DIFFICULTY_WEIGHTS: dict[HalveItDifficulty, tuple[int, int, int]] = {
    "easy": (10, 0, 0),
    "medium": (6, 4, 0),
    "hard": (4, 3, 3),
    "pro": (2, 4, 4),
}


@dataclass(frozen=True, slots=True)
class HalveItTarget:
    kind: HalveItTargetKind
    number: int = BULL

    @classmethod
    def bull(cls) -> HalveItTarget:
        return cls("bull", BULL)

    @classmethod
    def parse(cls, label: str) -> HalveItTarget:
        """``20``, ``D16``, ``T19`` or ``BULL``."""
        text = label.strip().upper()
        if text in {"BULL", "B", "25"}:
            return cls.bull()
        kinds: dict[str, HalveItTargetKind] = {"S": "single", "D": "double", "T": "triple"}
        kind: HalveItTargetKind = "single"
        if text[:1] in kinds:
            kind = kinds[text[0]]
            text = text[1:]
        number = int(text)
        if not 1 <= number <= 20:
            raise ValueError(f"Not a Halve-It target: {label!r}")
        return cls(kind, number)

    @property
    def display_text(self) -> str:
        match self.kind:
            case "single":
                return str(self.number)
            case "double":
                return f"D{self.number}"
            case "triple":
                return f"T{self.number}"
            case "bull":
                return "BULL"

    def is_hit(self, dart: ScoredThrow) -> bool:
        match self.kind:
            case "single":
                # any ring of the number counts
                return dart.base_value == self.number
            case "double":
                return dart.base_value == self.number and dart.score_type is ScoreType.DOUBLE
            case "triple":
                return dart.base_value == self.number and dart.score_type is ScoreType.TRIPLE
            case "bull":
                return dart.base_value == BULL

    def points(self, dart: ScoredThrow) -> int:
        return dart.total_value if self.is_hit(dart) else 0

    @property
    def aim(self) -> ScoredThrow:
        match self.kind:
            case "single" | "triple":
                return ScoredThrow(self.number, ScoreType.TRIPLE)
            case "double":
                return ScoredThrow(self.number, ScoreType.DOUBLE)
            case "bull":
                return ScoredThrow(BULL, ScoreType.DOUBLE)


def _random_target(difficulty: HalveItDifficulty, rng: random.Random) -> HalveItTarget:
    number = rng.randint(1, 20)
    single, double, _ = DIFFICULTY_WEIGHTS[difficulty]
    roll = rng.randint(1, 10)
    if roll <= single:
        return HalveItTarget("single", number)
    if roll <= single + double:
        return HalveItTarget("double", number)
    return HalveItTarget("triple", number)


def generate_targets(
    difficulty: HalveItDifficulty,
    rng: random.Random,
) -> list[HalveItTarget]:
    """Five distinct random targets for the difficulty, then the bull."""
    targets: list[HalveItTarget] = []
    while len(targets) < RANDOM_TARGETS:
        target = _random_target(difficulty, rng)
        if target not in targets:
            targets.append(target)
    targets.append(HalveItTarget.bull())
    return targets


@dataclass
class HalveItRules(GameRules):
    """
    Fixed rounds against one target each.

    Hitting the round's target adds the darts' value; missing with all three
    darts (or committing no darts at all) halves the score, rounding up.
    After the last round the highest score wins, the earliest seat taking
    exact ties.
    """

    name: ClassVar[GameName] = "HalveIt"
    display_name: ClassVar[str] = "Halve-It"

    difficulty: HalveItDifficulty = "easy"
    targets: list[HalveItTarget] | None = None

    @override
    @classmethod
    def from_config(cls, config: MatchConfig) -> Self:
        targets = None
        if config.targets:
            targets = [HalveItTarget.parse(t) for t in config.targets]
        return cls(difficulty=config.difficulty, targets=targets)

    @override
    def setup(self, engine: GameEngine) -> None:
        super().setup(engine)
        if not self.targets:
            self.targets = generate_targets(self.difficulty, engine.rng)
        engine.log_info(
            f"Targets: {', '.join(t.display_text for t in self.target_list)}",
        )

    @property
    def target_list(self) -> list[HalveItTarget]:
        if self.targets is None:
            raise RuntimeError("Targets are generated when the match is set up")
        return self.targets

    def current_target(self, engine: GameEngine) -> HalveItTarget | None:
        idx = engine.state.round_index
        if idx >= len(self.target_list):
            return None
        return self.target_list[idx]

    @override
    def resolve_turn(
        self,
        engine: GameEngine,
        player: PlayerState,
        darts: tuple[ScoredThrow, ...],
    ) -> TurnResolution:
        target = self.current_target(engine)
        if target is None:
            raise RuntimeError("Halve-It has no rounds left")

        before = player.score
        hits = [d for d in darts if target.is_hit(d)]
        meta = {"target": target.display_text, "hits": len(hits)}

        if not darts or (not hits and len(darts) >= MAX_DARTS_PER_TURN):
            player.score = (before + 1) // 2
            engine.log_info(f"{player.repr} missed {target.display_text}: {before} halved")
            return TurnResolution(before, player.score, "halved", meta)

        player.score = before + sum(target.points(d) for d in hits)
        return TurnResolution(before, player.score, "scored", meta)

    @override
    def advance(self, engine: GameEngine) -> None:
        state = engine.state
        state.current_player_idx += 1
        if state.current_player_idx < len(state.players):
            return
        state.current_player_idx = 0
        state.round_index += 1
        target = self.current_target(engine)
        if target is not None:
            engine.log_info(f"Round {state.round_index + 1}: target {target.display_text}")

    @override
    def check_winner(self, engine: GameEngine) -> int | None:
        if engine.state.round_index < len(self.target_list):
            return None
        best_idx: int | None = None
        best_score = -1
        for p in engine.state.players:
            if p.score > best_score:
                best_idx, best_score = p.idx, p.score
        return best_idx

    @override
    def target_display(self, record: TurnRecord) -> str | None:
        if record.round_index < len(self.target_list):
            return self.target_list[record.round_index].display_text
        return None

    @override
    def suggest_aim(self, engine: GameEngine) -> ScoredThrow:
        target = self.current_target(engine)
        if target is None:
            return super().suggest_aim(engine)
        return target.aim

    @override
    def metadata(self, engine: GameEngine) -> dict[str, str]:
        return {
            "difficulty": self.difficulty,
            "targets": ",".join(t.display_text for t in self.target_list),
        }
