# bidboard/session.py
from __future__ import annotations

import logging
from typing import List, Sequence

from .rules import MAX_PLAYERS, MIN_PLAYERS, clamp, rounds_for_players
from .state import Phase, Player, Round, Session

logger = logging.getLogger(__name__)


def start_placeholder(position: int) -> str:
    """Name used when a player starts a session with a blank name."""
    return f"J{position}"


def roster_placeholder(position: int) -> str:
    """Name used for a seat added while editing the roster."""
    return f"Jugador {position}"


def build_empty_rounds(round_count: int, players: List[Player]) -> List[Round]:
    """Build `round_count` fresh rounds (r = 1..round_count) in the bids phase."""
    rounds: List[Round] = []
    for i in range(round_count):
        rounds.append(
            Round(
                r=i + 1,
                bids={p.id: None for p in players},
                actuals={p.id: None for p in players},
                scores={p.id: 0 for p in players},
                phase=Phase.BIDS,
            )
        )
    return rounds


def start_session(player_names: Sequence[str]) -> Session:
    """
    Start a new session from a roster of names.

    - The roster is clamped to 2..6 players; extra names are dropped and a
      short roster is padded with placeholders.
    - Ids are assigned in seat order: p1, p2, ...
    - Blank or whitespace-only names become "J<seat>".
    """
    num_players = clamp(len(player_names), MIN_PLAYERS, MAX_PLAYERS)
    names = list(player_names[:num_players])
    names.extend([""] * (num_players - len(names)))

    players = [
        Player(id=f"p{i + 1}", name=name.strip() or start_placeholder(i + 1))
        for i, name in enumerate(names)
    ]
    round_count = rounds_for_players(num_players)

    logger.info(
        "Starting session with %d players (%s), %d rounds",
        num_players,
        ", ".join(p.name for p in players),
        round_count,
    )
    return Session(players=players, rounds=build_empty_rounds(round_count, players))


def change_player_count(players: List[Player], new_count: int) -> List[Player]:
    """
    Resize the roster before a session starts.

    Existing names are kept by seat, new seats get a placeholder and trailing
    seats are dropped when shrinking.
    """
    num_players = clamp(new_count, MIN_PLAYERS, MAX_PLAYERS)
    current = [p.name for p in players]
    resized: List[Player] = []
    for i in range(num_players):
        name = current[i] if i < len(current) else ""
        resized.append(Player(id=f"p{i + 1}", name=name or roster_placeholder(i + 1)))
    return resized


def rename_player(players: List[Player], index: int, name: str) -> List[Player]:
    if not 0 <= index < len(players):
        raise IndexError(f"No player at seat {index}")
    renamed = list(players)
    renamed[index] = Player(id=players[index].id, name=name)
    return renamed


def can_start(players: List[Player]) -> bool:
    """A session can start once every seat has a non-blank name."""
    return all(p.name and p.name.strip() for p in players)


def restart(session: Session) -> Session:
    """Fresh session with the same names; all round progress is discarded."""
    return start_session([p.name for p in session.players])
