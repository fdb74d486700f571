# bidboard/agents/base.py
from __future__ import annotations

from typing import Any, Dict, Protocol, runtime_checkable


@runtime_checkable
class BiddingAgent(Protocol):
    """
    Interface for simulated players.

    `observation` is a JSON-like dict containing:
      - round info (round number, tricks at stake, commander)
      - player info
      - bids placed so far this round, in bidding order
      - cumulative scores from finalized rounds
    """

    def choose_bid(self, observation: Dict[str, Any]) -> int:
        """Return the bid (0..tricks)."""

        raise NotImplementedError
