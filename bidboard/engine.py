# bidboard/engine.py
from __future__ import annotations

from dataclasses import dataclass, replace
import logging
from typing import Dict, List, Mapping, Optional

from .rules import (
    actuals_are_invalid,
    bids_are_invalid,
    entry_sum,
    is_complete,
    round_score,
)
from .state import Phase, Player, Round

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntryState:
    """Live view of a pending (unsaved) bid or actual entry."""
    total: int
    all_filled: bool
    is_valid: bool


# -----------------------------------------------------------------------------
# Derivation
# -----------------------------------------------------------------------------


def recompute(round_state: Round, players: List[Player]) -> Round:
    """
    Re-derive scores, round total and both validity flags from the round's
    current bids and actuals. Phase is left untouched.

    Validity is only judged once every player has an entry, so a partially
    filled round is never flagged.
    """
    bids = {p.id: round_state.bids.get(p.id) for p in players}
    actuals = {p.id: round_state.actuals.get(p.id) for p in players}

    bids_all = is_complete(bids, players)
    actuals_all = is_complete(actuals, players)

    bids_invalid = (
        bids_are_invalid(entry_sum(bids.values()), round_state.r)
        if bids_all
        else False
    )
    actuals_invalid = (
        actuals_are_invalid(entry_sum(actuals.values()), round_state.r)
        if actuals_all
        else False
    )

    scores: Dict[str, int] = {}
    for p in players:
        bid = bids[p.id]
        actual = actuals[p.id]
        if isinstance(bid, int) and isinstance(actual, int):
            scores[p.id] = round_score(bid, actual)
        else:
            scores[p.id] = 0

    return replace(
        round_state,
        bids=bids,
        actuals=actuals,
        scores=scores,
        round_total=sum(scores.values()),
        bids_invalid=bids_invalid,
        actuals_invalid=actuals_invalid,
    )


def set_bids(
    round_state: Round,
    players: List[Player],
    new_bids: Mapping[str, Optional[int]],
) -> Round:
    """Replace the bids and re-derive. Only meaningful in the bids phase."""
    return recompute(replace(round_state, bids=dict(new_bids)), players)


def set_actuals(
    round_state: Round,
    players: List[Player],
    new_actuals: Mapping[str, Optional[int]],
) -> Round:
    """Replace the actuals and re-derive."""
    return recompute(replace(round_state, actuals=dict(new_actuals)), players)


# -----------------------------------------------------------------------------
# Guarded transitions
# -----------------------------------------------------------------------------


def can_lock_bids(round_state: Round, players: List[Player]) -> bool:
    # Reads the entries, not the cached flags.
    if round_state.phase != Phase.BIDS:
        return False
    if not is_complete(round_state.bids, players):
        return False
    total = entry_sum(round_state.bids.get(p.id) for p in players)
    return not bids_are_invalid(total, round_state.r)


def can_finalize(round_state: Round, players: List[Player]) -> bool:
    if round_state.phase != Phase.ACTUALS:
        return False
    if not is_complete(round_state.actuals, players):
        return False
    total = entry_sum(round_state.actuals.get(p.id) for p in players)
    return not actuals_are_invalid(total, round_state.r)


def lock_bids(round_state: Round, players: List[Player]) -> Round:
    """bids -> actuals, if every bid is in and the bids are valid."""
    if not can_lock_bids(round_state, players):
        logger.debug("Round %d: lock_bids ignored", round_state.r)
        return round_state
    return recompute(replace(round_state, phase=Phase.ACTUALS), players)


def finalize(round_state: Round, players: List[Player]) -> Round:
    """actuals -> done, if every actual is in and they add up to r."""
    if not can_finalize(round_state, players):
        logger.debug("Round %d: finalize ignored", round_state.r)
        return round_state
    return recompute(replace(round_state, phase=Phase.DONE), players)


def unlock(round_state: Round, players: List[Player]) -> Round:
    """actuals -> bids. Clears every actual; bids are kept."""
    if round_state.phase != Phase.ACTUALS:
        logger.debug("Round %d: unlock ignored", round_state.r)
        return round_state
    cleared = replace(
        round_state,
        phase=Phase.BIDS,
        actuals={p.id: None for p in players},
    )
    return recompute(cleared, players)


def revert_final(round_state: Round) -> Round:
    """done -> actuals, leaving bids, actuals and scores as they are."""
    if round_state.phase != Phase.DONE:
        logger.debug("Round %d: revert_final ignored", round_state.r)
        return round_state
    return replace(round_state, phase=Phase.ACTUALS)


def save_and_lock_bids(
    round_state: Round,
    players: List[Player],
    new_bids: Mapping[str, Optional[int]],
) -> Round:
    return lock_bids(set_bids(round_state, players, new_bids), players)


def save_and_finalize(
    round_state: Round,
    players: List[Player],
    new_actuals: Mapping[str, Optional[int]],
) -> Round:
    return finalize(set_actuals(round_state, players, new_actuals), players)


# -----------------------------------------------------------------------------
# Pending entry helpers
# -----------------------------------------------------------------------------


def bid_entry_state(
    round_state: Round,
    players: List[Player],
    pending: Mapping[str, Optional[int]],
) -> EntryState:
    total = entry_sum(pending.get(p.id) for p in players)
    all_filled = is_complete(pending, players)
    return EntryState(
        total=total,
        all_filled=all_filled,
        is_valid=all_filled and not bids_are_invalid(total, round_state.r),
    )


def actual_entry_state(
    round_state: Round,
    players: List[Player],
    pending: Mapping[str, Optional[int]],
) -> EntryState:
    total = entry_sum(pending.get(p.id) for p in players)
    all_filled = is_complete(pending, players)
    return EntryState(
        total=total,
        all_filled=all_filled,
        is_valid=all_filled and not actuals_are_invalid(total, round_state.r),
    )


def current_round_index(rounds: List[Round]) -> Optional[int]:
    """Index of the first round that is not done, or None if all are."""
    for idx, rd in enumerate(rounds):
        if rd.phase != Phase.DONE:
            return idx
    return None


def commander_for(players: List[Player], round_index: int) -> Player:
    """The player who leads (and bids last in) the round at `round_index`."""
    if not players:
        raise ValueError("No players to pick a commander from")
    return players[round_index % len(players)]
