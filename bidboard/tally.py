# bidboard/tally.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Set

from .state import Phase, Player, Round


@dataclass(frozen=True)
class Tallies:
    cumulative: Dict[str, int]
    share_pct: Dict[str, float]
    exact_hits: Dict[str, int]
    cum_total: int


def compute_tallies(rounds: List[Round], players: List[Player]) -> Tallies:
    """
    Fold every finalized round into per-player totals.

    Rounds not in the done phase contribute nothing, whatever scores they
    currently hold. `share_pct` is 0 for everyone unless the grand total is
    positive; with a positive total, players below zero get a negative share
    and the others can exceed 100.
    """
    cumulative: Dict[str, int] = {p.id: 0 for p in players}
    exact_hits: Dict[str, int] = {p.id: 0 for p in players}

    for rd in rounds:
        if rd.phase != Phase.DONE:
            continue
        for p in players:
            cumulative[p.id] += rd.scores.get(p.id, 0)
            bid = rd.bids.get(p.id)
            actual = rd.actuals.get(p.id)
            if isinstance(bid, int) and isinstance(actual, int) and bid == actual:
                exact_hits[p.id] += 1

    cum_total = sum(cumulative.values())
    if cum_total > 0:
        share_pct = {
            pid: 100 * value / cum_total for pid, value in cumulative.items()
        }
    else:
        share_pct = {pid: 0.0 for pid in cumulative}

    return Tallies(
        cumulative=cumulative,
        share_pct=share_pct,
        exact_hits=exact_hits,
        cum_total=cum_total,
    )


def find_leaders(cumulative: Mapping[str, int]) -> Set[str]:
    """Every player tied at the highest cumulative score."""
    if not cumulative:
        return set()
    best = max(cumulative.values())
    return {pid for pid, value in cumulative.items() if value == best}


def crowned_leaders(tallies: Tallies) -> Set[str]:
    """Leaders worth highlighting: nobody until the grand total is positive."""
    if tallies.cum_total <= 0:
        return set()
    return find_leaders(tallies.cumulative)
