# bidboard/results/standings.py
from __future__ import annotations

import argparse
from typing import List, Optional

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def load_scores(csv_path) -> pd.DataFrame:
    """Load a CSV written by `bidboard.game_log` / `bidboard.cli`."""
    df = pd.read_csv(csv_path)
    # an export without a game id leaves the column empty
    df["game_id"] = df["game_id"].fillna("").astype(str)
    # csv stores booleans as text
    df["exact_hit"] = df["exact_hit"].astype(str).str.lower() == "true"
    return df


def final_standings(df: pd.DataFrame) -> pd.DataFrame:
    """
    One row per (game, player): final total, exact hits and share of the
    game's grand total. Share is 0 when that total is not positive.
    """
    last_round = df.groupby("game_id")["round"].transform("max")
    finals = (
        df[df["round"] == last_round][["game_id", "player_id", "player_name", "total_score"]]
        .copy()
    )
    hits = (
        df.groupby(["game_id", "player_id"])["exact_hit"]
        .sum()
        .rename("exact_hits")
        .reset_index()
    )
    finals = finals.merge(hits, on=["game_id", "player_id"])

    game_total = finals.groupby("game_id")["total_score"].transform("sum")
    finals["share_pct"] = np.where(
        game_total > 0,
        100 * finals["total_score"] / game_total.where(game_total != 0, 1),
        0.0,
    )
    return finals.sort_values(["game_id", "total_score"], ascending=[True, False]).reset_index(drop=True)


def exact_hit_rate(df: pd.DataFrame) -> pd.Series:
    """Fraction of rounds each player called exactly, across all games."""
    return df.groupby("player_name")["exact_hit"].mean().sort_index()


def plot_cumulative(df: pd.DataFrame, ax: Optional[plt.Axes] = None) -> plt.Axes:
    """Mean running total per round for each player, averaged over games."""
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 6))

    per_round = (
        df.groupby(["player_name", "round"])["total_score"]
          .mean()
          .reset_index()
    )
    for name in sorted(per_round["player_name"].unique()):
        sub = per_round[per_round["player_name"] == name].sort_values("round")
        ax.plot(sub["round"], sub["total_score"], marker="o", label=name)

    ax.axhline(0, linestyle="--", linewidth=0.8)
    ax.set_xlabel("Round")
    ax.set_ylabel("Total score (mean across games)")
    ax.set_title("Running total by round")
    ax.grid(True, linestyle=":", alpha=0.5)
    ax.legend()
    return ax


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Summarize a bidboard score CSV.")
    parser.add_argument("csv", help="CSV written by bidboard.cli")
    parser.add_argument(
        "--plot",
        type=str,
        default=None,
        help="Optional image path for the running-total chart.",
    )
    args = parser.parse_args(argv)

    df = load_scores(args.csv)
    print(final_standings(df).to_string(index=False))
    print()
    print("Exact-hit rate:")
    print(exact_hit_rate(df).to_string())

    if args.plot:
        ax = plot_cumulative(df)
        ax.figure.tight_layout()
        ax.figure.savefig(args.plot)
        plt.close(ax.figure)


if __name__ == "__main__":
    main()
