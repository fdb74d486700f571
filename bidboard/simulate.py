# bidboard/simulate.py
from __future__ import annotations

import logging
import random
from typing import Any, Dict, List, Optional

from .agents.base import BiddingAgent
from .rules import clamp_entry
from .scorekeeper import Scorekeeper
from .state import Phase, Round, Session

logger = logging.getLogger(__name__)


def bidding_order(num_players: int, round_index: int) -> List[int]:
    """Seats in bidding order: starts left of the commander, commander last."""
    commander_seat = round_index % num_players
    return [
        (commander_seat + offset) % num_players
        for offset in range(1, num_players + 1)
    ]


def deal_tricks(rng: random.Random, tricks: int, player_ids: List[str]) -> Dict[str, int]:
    """Hand out `tricks` tricks at random; the counts always add up."""
    counts = {pid: 0 for pid in player_ids}
    for _ in range(tricks):
        counts[rng.choice(player_ids)] += 1
    return counts


def simulate_round(
    keeper: Scorekeeper,
    index: int,
    agents: List[BiddingAgent],
    rng: random.Random,
) -> Round:
    """Drive round `index` from empty bids to done."""
    session = keeper.session
    if session is None:
        raise RuntimeError("No session started")
    players = session.players
    rd = session.rounds[index]

    bids: Dict[str, Optional[int]] = {}
    order = bidding_order(len(players), index)
    for seat in order:
        player = players[seat]
        obs = _build_bid_observation(keeper, session, index, seat, order, bids)
        bid = agents[seat].choose_bid(obs)
        if not isinstance(bid, int):
            raise ValueError("Agent returned non-int bid")
        bids[player.id] = clamp_entry(bid, rd.r)

    # The commander bids last and is the one forced off the forbidden total.
    commander = players[order[-1]]
    if sum(b for b in bids.values() if b is not None) == rd.r:
        bid = bids[commander.id] or 0
        bids[commander.id] = bid + 1 if bid < rd.r else bid - 1
        logger.debug(
            "Round %d: %s moved bid to %d to avoid a total of %d",
            rd.r,
            commander.name,
            bids[commander.id],
            rd.r,
        )

    rd = keeper.save_and_lock_bids(index, bids)
    if rd.phase != Phase.ACTUALS:
        raise RuntimeError(f"Round {rd.r}: bids could not be locked")

    actuals = deal_tricks(rng, rd.r, [p.id for p in players])
    rd = keeper.save_and_finalize(index, actuals)
    if rd.phase != Phase.DONE:
        raise RuntimeError(f"Round {rd.r}: actuals could not be finalized")
    return rd


def simulate_session(
    keeper: Scorekeeper,
    agents: List[BiddingAgent],
    rng: random.Random,
) -> Session:
    """Play every remaining round of the keeper's session."""
    session = keeper.session
    if session is None:
        raise RuntimeError("No session started")
    if len(agents) != session.num_players:
        raise ValueError("Need exactly one agent per player")

    while True:
        index = keeper.current_round_index()
        if index is None:
            break
        simulate_round(keeper, index, agents, rng)
        logger.info(
            "Finished round %d/%d%s",
            index + 1,
            session.round_count,
            f" for {keeper.game_label}" if keeper.game_label else "",
        )
    return session


def _build_bid_observation(
    keeper: Scorekeeper,
    session: Session,
    index: int,
    seat: int,
    order: List[int],
    bids_so_far: Dict[str, Optional[int]],
) -> Dict[str, Any]:
    player = session.players[seat]
    rd = session.rounds[index]
    return {
        "round": {
            "game_id": keeper.game_label,
            "round_index": index,
            "tricks": rd.r,
            "num_players": session.num_players,
            "commander_id": session.players[order[-1]].id,
        },
        "player": {
            "id": player.id,
            "name": player.name,
        },
        "bids_so_far": dict(bids_so_far),
        "bidding_order": [session.players[s].id for s in order],
        "scores": dict(keeper.tallies().cumulative),
    }
