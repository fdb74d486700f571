from .base import BiddingAgent
from .random_agent import RandomBiddingAgent

__all__ = [
    "BiddingAgent",
    "RandomBiddingAgent",
]
