import pytest

from bidboard.event_log import TransitionLogger
from bidboard.scorekeeper import Scorekeeper
from bidboard.state import Phase


def _started(names=("A", "B", "C"), **kwargs) -> Scorekeeper:
    keeper = Scorekeeper(player_names=list(names), **kwargs)
    keeper.start()
    return keeper


def test_setup_defaults_and_roster_edits():
    keeper = Scorekeeper()
    assert keeper.in_setup
    assert [p.name for p in keeper.players] == ["P1", "P2", "P3"]

    keeper.change_player_count(4)
    keeper.rename_player(0, "Ana")
    assert [p.name for p in keeper.players] == ["Ana", "P2", "P3", "Jugador 4"]
    assert keeper.can_start()

    session = keeper.start()
    assert not keeper.in_setup
    assert session.round_count == 13


def test_round_count_follows_roster_in_setup():
    keeper = Scorekeeper()
    assert keeper.round_count == 17

    keeper.change_player_count(4)
    assert keeper.round_count == 13
    keeper.change_player_count(6)
    assert keeper.round_count == 8

    keeper.start()
    assert keeper.round_count == keeper.session.round_count == 8


def test_roster_edits_rejected_mid_game():
    keeper = _started()
    with pytest.raises(RuntimeError):
        keeper.change_player_count(4)
    with pytest.raises(RuntimeError):
        keeper.rename_player(0, "X")

    keeper.return_to_setup()
    assert keeper.change_player_count(2)[1].name == "B"


def test_round_events_need_a_session():
    keeper = Scorekeeper()
    with pytest.raises(RuntimeError):
        keeper.lock_bids(0)
    with pytest.raises(RuntimeError):
        keeper.tallies()


def test_round_index_is_checked():
    keeper = _started()
    with pytest.raises(IndexError):
        keeper.set_bids(17, {"p1": 0})
    with pytest.raises(IndexError):
        keeper.round(-1)


def test_walkthrough_of_round_five():
    keeper = _started()
    idx = 4

    rd = keeper.set_bids(idx, {"p1": 2, "p2": 2, "p3": 1})
    assert rd.bids_invalid
    assert keeper.lock_bids(idx).phase == Phase.BIDS

    keeper.set_bids(idx, {"p1": 2, "p2": 2, "p3": 2})
    assert keeper.lock_bids(idx).phase == Phase.ACTUALS

    rd = keeper.set_actuals(idx, {"p1": 2, "p2": 1, "p3": 1})
    assert rd.actuals_invalid
    assert keeper.finalize(idx).phase == Phase.ACTUALS

    keeper.set_actuals(idx, {"p1": 2, "p2": 2, "p3": 1})
    rd = keeper.finalize(idx)
    assert rd.phase == Phase.DONE
    assert rd.scores == {"p1": 12, "p2": 12, "p3": 8}

    assert keeper.round(idx) is rd
    tallies = keeper.tallies()
    assert tallies.cumulative == {"p1": 12, "p2": 12, "p3": 8}
    assert keeper.leaders() == {"p1", "p2"}
    assert keeper.crowned_leaders() == {"p1", "p2"}
    assert keeper.current_round_index() == 0


def test_reversals_through_keeper():
    keeper = _started()
    keeper.save_and_lock_bids(0, {"p1": 1, "p2": 1, "p3": 1})
    rd = keeper.save_and_finalize(0, {"p1": 1, "p2": 0, "p3": 0})
    assert rd.phase == Phase.DONE
    assert keeper.current_round_index() == 1

    rd = keeper.revert_final(0)
    assert rd.phase == Phase.ACTUALS
    assert rd.actuals == {"p1": 1, "p2": 0, "p3": 0}
    assert keeper.tallies().cumulative == {"p1": 0, "p2": 0, "p3": 0}

    rd = keeper.unlock(0)
    assert rd.phase == Phase.BIDS
    assert rd.bids == {"p1": 1, "p2": 1, "p3": 1}
    assert rd.actuals == {"p1": None, "p2": None, "p3": None}


def test_restart_keeps_names_and_drops_progress():
    keeper = _started(names=("Ana", "", "Bea"))
    keeper.save_and_lock_bids(0, {"p1": 0, "p2": 0, "p3": 0})

    session = keeper.restart()
    assert [p.name for p in session.players] == ["Ana", "J2", "Bea"]
    assert session.rounds[0].phase == Phase.BIDS
    assert keeper.crowned_leaders() == set()


def test_commander_for_round():
    keeper = _started()
    assert keeper.commander(0).id == "p1"
    assert keeper.commander(4).id == "p2"


def test_events_are_logged(tmp_path):
    log = TransitionLogger(tmp_path / "events.log")
    keeper = _started(transition_logger=log, game_label="g1")

    keeper.save_and_lock_bids(1, {"p1": 1, "p2": 0, "p3": 0})
    keeper.finalize(1)

    entries = log.entries
    assert entries[0].startswith("=== Event: start | Game: g1 | Result: applied ===")
    assert "Event: save_and_lock_bids | Game: g1 | Round: 2 | Result: applied" in entries[1]
    assert "Phase: bids -> actuals" in entries[1]
    assert "Bids: p1=1, p2=0, p3=0" in entries[1]
    assert "Event: finalize | Game: g1 | Round: 2 | Result: ignored" in entries[2]
