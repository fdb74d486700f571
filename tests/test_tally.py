import pytest

from bidboard import engine
from bidboard.state import Phase, Player, Round
from bidboard.tally import compute_tallies, crowned_leaders, find_leaders

PLAYERS = [
    Player(id="a", name="A"),
    Player(id="b", name="B"),
    Player(id="c", name="C"),
]


def _round(r, bids, actuals, phase):
    return engine.recompute(Round(r=r, bids=bids, actuals=actuals, phase=phase), PLAYERS)


def test_tallies_from_one_finished_round():
    rd = _round(5, {"a": 2, "b": 2, "c": 2}, {"a": 2, "b": 2, "c": 1}, Phase.DONE)

    tallies = compute_tallies([rd], PLAYERS)
    assert tallies.cumulative == {"a": 12, "b": 12, "c": 8}
    assert tallies.exact_hits == {"a": 1, "b": 1, "c": 0}
    assert tallies.cum_total == 32
    assert tallies.share_pct["a"] == pytest.approx(37.5)
    assert tallies.share_pct["c"] == pytest.approx(25.0)
    assert sum(tallies.share_pct.values()) == pytest.approx(100.0)


def test_unfinished_rounds_do_not_count():
    done = _round(1, {"a": 1, "b": 1, "c": 1}, {"a": 1, "b": 0, "c": 0}, Phase.DONE)
    # Fully scored but only in the actuals phase.
    open_round = _round(2, {"a": 0, "b": 0, "c": 0}, {"a": 0, "b": 1, "c": 1}, Phase.ACTUALS)
    bids_round = _round(3, {"a": 3, "b": None, "c": None}, {}, Phase.BIDS)
    assert open_round.scores["a"] == 10

    tallies = compute_tallies([done, open_round, bids_round], PLAYERS)
    assert tallies.cumulative == {"a": 11, "b": 9, "c": 9}
    assert tallies.exact_hits == {"a": 1, "b": 0, "c": 0}


def test_share_is_zero_without_positive_total():
    tallies = compute_tallies([], PLAYERS)
    assert tallies.cum_total == 0
    assert tallies.share_pct == {"a": 0.0, "b": 0.0, "c": 0.0}


def test_share_with_negative_player_and_positive_total():
    # Known boundary: a negative player gets a negative share and the
    # others exceed 100 percent between them.
    rd = _round(12, {"a": 12, "b": 0, "c": 12}, {"a": 0, "b": 0, "c": 12}, Phase.DONE)
    tallies = compute_tallies([rd], PLAYERS)
    assert tallies.cumulative == {"a": -2, "b": 10, "c": 22}
    assert tallies.cum_total == 30
    assert tallies.share_pct["a"] == pytest.approx(-2 * 100 / 30)
    assert tallies.share_pct["a"] < 0
    assert tallies.share_pct["b"] + tallies.share_pct["c"] > 100


def test_share_is_zero_for_negative_total():
    rd = _round(12, {"a": 12, "b": 12, "c": 0}, {"a": 0, "b": 0, "c": 12}, Phase.DONE)
    tallies = compute_tallies([rd], PLAYERS)
    assert tallies.cum_total == -6
    assert tallies.share_pct == {"a": 0.0, "b": 0.0, "c": 0.0}


def test_find_leaders_includes_ties():
    assert find_leaders({"a": 12, "b": 12, "c": 8}) == {"a", "b"}
    assert find_leaders({"a": -1, "b": -4}) == {"a"}
    assert find_leaders({}) == set()


def test_crowned_leaders_need_positive_total():
    assert crowned_leaders(compute_tallies([], PLAYERS)) == set()

    rd = _round(5, {"a": 2, "b": 2, "c": 2}, {"a": 2, "b": 2, "c": 1}, Phase.DONE)
    assert crowned_leaders(compute_tallies([rd], PLAYERS)) == {"a", "b"}
