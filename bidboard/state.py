# bidboard/state.py
from __future__ import annotations

from dataclasses import dataclass, field
import enum
from typing import Dict, List, Optional


class Phase(enum.Enum):
    BIDS = "bids"
    ACTUALS = "actuals"
    DONE = "done"


@dataclass
class Player:
    id: str
    name: str


@dataclass
class Round:
    """
    One round of play. `r` is the round number and the number of tricks at
    stake.

    `bids` / `actuals` map player id -> int, or None while unset. Everything
    below them is derived by `engine.recompute`.
    """
    r: int
    bids: Dict[str, Optional[int]] = field(default_factory=dict)
    actuals: Dict[str, Optional[int]] = field(default_factory=dict)
    scores: Dict[str, int] = field(default_factory=dict)
    round_total: int = 0
    bids_invalid: bool = False
    actuals_invalid: bool = False
    phase: Phase = Phase.BIDS


@dataclass
class Session:
    players: List[Player]
    rounds: List[Round] = field(default_factory=list)

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def round_count(self) -> int:
        return len(self.rounds)

    @property
    def player_ids(self) -> List[str]:
        return [p.id for p in self.players]

    @property
    def is_finished(self) -> bool:
        return bool(self.rounds) and all(
            rd.phase == Phase.DONE for rd in self.rounds
        )
