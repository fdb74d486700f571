# bidboard/rules.py
from __future__ import annotations

from typing import Iterable, List, Mapping, Optional

from .state import Player

DECK_SIZE = 52
MIN_PLAYERS = 2
MAX_PLAYERS = 6


def round_score(bid: int, actual: int) -> int:
    """
    Score one player's round:

    - If actual == bid: 10 + actual
    - Else: 10 − max(bid, actual)  (negative once the larger side exceeds 10)
    """
    if actual == bid:
        return 10 + actual
    return 10 - max(bid, actual)


def rounds_for_players(num_players: int) -> int:
    """Number of rounds in a session: one 52-card deck split across players."""
    return DECK_SIZE // num_players


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def clamp_entry(value: int, r: int) -> int:
    """Clamp a bid or actual into [0, r] before it reaches the engine."""
    return clamp(value, 0, r)


def is_complete(
    entries: Mapping[str, Optional[int]],
    players: List[Player],
) -> bool:
    """Return True if every player has an int entry."""
    return all(isinstance(entries.get(p.id), int) for p in players)


def entry_sum(values: Iterable[Optional[int]]) -> int:
    """Sum of the entries that are set; unset entries count as zero."""
    return sum(v for v in values if isinstance(v, int))


def bids_are_invalid(total: int, r: int) -> bool:
    # House rule: the bids may never add up to the tricks available.
    return total == r


def actuals_are_invalid(total: int, r: int) -> bool:
    # Every trick is taken by someone.
    return total != r
