# bidboard/agents/random_agent.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict
import random

from .base import BiddingAgent


@dataclass
class RandomBiddingAgent(BiddingAgent):
    """
    Baseline bidder: expects roughly a fair share of the tricks, then adds a
    little random jitter.
    """

    rng: random.Random

    def choose_bid(self, observation: Dict[str, Any]) -> int:
        tricks = observation["round"]["tricks"]
        num_players = observation["round"]["num_players"]

        expected = tricks // num_players
        low = max(0, expected - 1)
        high = min(tricks, expected + 1)
        return self.rng.randint(low, high)
