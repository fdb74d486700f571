# bidboard/cli.py
from __future__ import annotations

import argparse
import logging
import random
from pathlib import Path
from typing import Any, Dict, List

from .agents import RandomBiddingAgent
from .event_log import TransitionLogger
from .game_log import build_round_score_rows, write_rows_csv
from .rules import MAX_PLAYERS, MIN_PLAYERS
from .scorekeeper import Scorekeeper
from .simulate import simulate_session


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Simulate scorekept bidding sessions with random bidders and log "
            "per-round scores to a CSV file."
        )
    )

    parser.add_argument(
        "--players",
        nargs="+",
        required=True,
        help="Player names in seat order (2 to 6), e.g. --players Ana Luis Marta",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=1,
        help="Number of full sessions to play (default: 1).",
    )
    parser.add_argument(
        "--csv",
        type=str,
        default="bidboard_scores.csv",
        help="Path to the output CSV file (default: bidboard_scores.csv).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Base random seed for bidders and trick outcomes.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ...). Default: INFO.",
    )
    parser.add_argument(
        "--event-log",
        type=str,
        default=None,
        help="Optional path for a text log of every round event.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="results",
        help="Directory that relative --csv / --event-log paths are written to (default: results).",
    )

    return parser.parse_args(argv)


def output_path(path_like: str, output_dir: Path) -> Path:
    """
    Anchor a relative output path inside `output_dir`, creating the directory.
    Absolute paths are used as given.
    """
    path = Path(path_like)
    if path.is_absolute():
        return path
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / path


def _play_single_game(
    game_index: int,
    *,
    player_names: List[str],
    seed: int,
    transition_logger: TransitionLogger | None,
) -> List[Dict[str, Any]]:
    game_id = f"game-{game_index}"
    rng = random.Random(seed + game_index)

    keeper = Scorekeeper(
        player_names=player_names,
        transition_logger=transition_logger,
        game_label=game_id,
    )
    session = keeper.start()
    agents = [
        RandomBiddingAgent(rng=random.Random(seed + game_index * 1000 + i))
        for i in range(session.num_players)
    ]
    simulate_session(keeper, agents, rng)

    tallies = keeper.tallies()
    names = {p.id: p.name for p in session.players}
    logging.info(
        "Finished %s: %s",
        game_id,
        ", ".join(
            f"{names[pid]}={total} ({tallies.share_pct[pid]:.1f}%, "
            f"{tallies.exact_hits[pid]} exact)"
            for pid, total in tallies.cumulative.items()
        ),
    )
    logging.info(
        "Leaders of %s: %s",
        game_id,
        ", ".join(sorted(names[pid] for pid in keeper.crowned_leaders())) or "-",
    )
    return build_round_score_rows(session, game_id=game_id)


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    output_dir = Path(args.output_dir)
    csv_path = output_path(args.csv, output_dir)
    event_path = output_path(args.event_log, output_dir) if args.event_log else None

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    num_players = len(args.players)
    if num_players < MIN_PLAYERS or num_players > MAX_PLAYERS:
        raise SystemExit(
            f"Sessions need between {MIN_PLAYERS} and {MAX_PLAYERS} players; "
            f"got {num_players}."
        )

    logging.info("Players: %s", ", ".join(args.players))
    logging.info("Games to play: %d", args.games)
    logging.info("Output CSV: %s", csv_path)
    if event_path:
        logging.info("Event log: %s", event_path)

    transition_logger = TransitionLogger(event_path) if event_path else None

    all_rows: List[Dict[str, Any]] = []
    for game_index in range(args.games):
        all_rows.extend(
            _play_single_game(
                game_index,
                player_names=args.players,
                seed=args.seed,
                transition_logger=transition_logger,
            )
        )

    write_rows_csv(all_rows, csv_path)
    logging.info(
        "Finished %d games; wrote %d rows to %s",
        args.games,
        len(all_rows),
        csv_path,
    )

    if transition_logger:
        transition_logger.flush()


if __name__ == "__main__":
    main()

'''
python3 -m bidboard.cli \
  --players Ana Luis Marta \
  --games 20 \
  --csv bidboard_20_games.csv \
  --event-log bidboard_20_games_events.log \
  --seed 1
'''
