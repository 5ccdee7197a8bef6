from typing import Literal

GameName = Literal[
    "Countdown",
    "HalveIt",
    "Knockout",
    "Killer",
    "SuddenDeath",
]

HalveItDifficulty = Literal["easy", "medium", "hard", "pro"]

HalveItTargetKind = Literal["single", "double", "triple", "bull"]

TurnOutcome = Literal[
    "scored",
    "bust",
    "checkout",
    "halved",
    "life_lost",
    "score_to_beat",
    "round_score",
    "killer_turn",
]

KillerDartOutcome = Literal[
    "became_killer",
    "hit_opponent",
    "hit_own_number",
    "miss",
]
