# bidboard/game_log.py
from __future__ import annotations

import csv
from typing import Any, Dict, List, Optional

from .engine import commander_for
from .state import Phase, Session

FIELDNAMES = [
    "game_id",
    "round",
    "commander_id",
    "player_id",
    "player_name",
    "bid",
    "actual",
    "round_score",
    "exact_hit",
    "total_score",
]


def build_round_score_rows(
    session: Session,
    game_id: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Build a list of rows summarizing per-round scores for CSV export.

    Each row corresponds to (round, player) and has keys in FIELDNAMES. Only
    finalized rounds are exported, so a session still in progress yields the
    rounds scored so far and `total_score` matches the running tallies.
    """
    players = session.players
    running_scores: Dict[str, int] = {p.id: 0 for p in players}
    rows: List[Dict[str, Any]] = []

    for idx, rd in enumerate(session.rounds):
        if rd.phase != Phase.DONE:
            continue
        commander = commander_for(players, idx)

        for p in players:
            pid = p.id
            score = rd.scores.get(pid, 0)
            running_scores[pid] += score
            bid = rd.bids.get(pid)
            actual = rd.actuals.get(pid)

            rows.append(
                {
                    "game_id": game_id,
                    "round": rd.r,
                    "commander_id": commander.id,
                    "player_id": pid,
                    "player_name": p.name,
                    "bid": bid,
                    "actual": actual,
                    "round_score": score,
                    "exact_hit": bid is not None and bid == actual,
                    "total_score": running_scores[pid],
                }
            )

    return rows


def write_round_scores_csv(
    session: Session,
    path,
    game_id: Optional[str] = None,
) -> None:
    """
    Write per-round scores to a CSV file.

    `path` can be a string or any path-like object accepted by `open`.
    """
    write_rows_csv(build_round_score_rows(session, game_id=game_id), path)


def write_rows_csv(rows: List[Dict[str, Any]], path) -> None:
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=FIELDNAMES)
        writer.writeheader()
        for row in rows:
            writer.writerow({field: row.get(field) for field in FIELDNAMES})
