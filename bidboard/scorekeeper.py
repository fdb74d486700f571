# bidboard/scorekeeper.py
from __future__ import annotations

import logging
from typing import Callable, List, Mapping, Optional, Sequence, Set

from . import engine
from .event_log import TransitionLogger
from .rules import MAX_PLAYERS, MIN_PLAYERS, clamp, rounds_for_players
from .session import (
    can_start,
    change_player_count,
    rename_player,
    restart,
    start_session,
)
from .state import Player, Round, Session
from .tally import Tallies, compute_tallies, crowned_leaders, find_leaders

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAMES = ["P1", "P2", "P3"]


class Scorekeeper:
    """
    Owns one session and turns caller events into engine operations.

    Before `start` the scorekeeper is in setup: the roster can be resized and
    renamed. Once a session is running, round events are addressed by
    0-based round index and every event replaces the stored Round with the
    fully derived one the engine returns.
    """

    def __init__(
        self,
        player_names: Optional[Sequence[str]] = None,
        transition_logger: Optional[TransitionLogger] = None,
        game_label: Optional[str] = None,
    ) -> None:
        names = list(player_names) if player_names is not None else DEFAULT_PLAYER_NAMES
        self.roster: List[Player] = [
            Player(id=f"p{i + 1}", name=name) for i, name in enumerate(names)
        ]
        self.session: Optional[Session] = None
        self.transition_logger = transition_logger
        self.game_label = game_label

    # -------------------------------------------------------------------------
    # Setup
    # -------------------------------------------------------------------------

    @property
    def in_setup(self) -> bool:
        return self.session is None

    @property
    def players(self) -> List[Player]:
        if self.session is not None:
            return self.session.players
        return self.roster

    @property
    def round_count(self) -> int:
        """Rounds in the running session, or the count the roster would get."""
        if self.session is not None:
            return self.session.round_count
        return rounds_for_players(clamp(len(self.roster), MIN_PLAYERS, MAX_PLAYERS))

    def change_player_count(self, new_count: int) -> List[Player]:
        self._require_setup("change_player_count")
        self.roster = change_player_count(self.roster, new_count)
        return self.roster

    def rename_player(self, index: int, name: str) -> List[Player]:
        self._require_setup("rename_player")
        self.roster = rename_player(self.roster, index, name)
        return self.roster

    def can_start(self) -> bool:
        return can_start(self.roster)

    def start(self, player_names: Optional[Sequence[str]] = None) -> Session:
        names = (
            list(player_names)
            if player_names is not None
            else [p.name for p in self.roster]
        )
        self.session = start_session(names)
        self.roster = list(self.session.players)
        self._log("start", None, applied=True)
        return self.session

    def restart(self) -> Session:
        session = self._require_session()
        self.session = restart(session)
        self.roster = list(self.session.players)
        self._log("restart", None, applied=True)
        return self.session

    def return_to_setup(self) -> List[Player]:
        """Drop the running session, keeping the names for the next start."""
        self.session = None
        return self.roster

    # -------------------------------------------------------------------------
    # Round events
    # -------------------------------------------------------------------------

    def set_bids(self, index: int, bids: Mapping[str, Optional[int]]) -> Round:
        return self._apply(
            "set_bids",
            index,
            lambda rd, players: engine.set_bids(rd, players, bids),
        )

    def set_actuals(
        self, index: int, actuals: Mapping[str, Optional[int]]
    ) -> Round:
        return self._apply(
            "set_actuals",
            index,
            lambda rd, players: engine.set_actuals(rd, players, actuals),
        )

    def lock_bids(self, index: int) -> Round:
        return self._apply("lock_bids", index, engine.lock_bids)

    def finalize(self, index: int) -> Round:
        return self._apply("finalize", index, engine.finalize)

    def unlock(self, index: int) -> Round:
        return self._apply("unlock", index, engine.unlock)

    def revert_final(self, index: int) -> Round:
        return self._apply(
            "revert_final",
            index,
            lambda rd, players: engine.revert_final(rd),
        )

    def save_and_lock_bids(
        self, index: int, bids: Mapping[str, Optional[int]]
    ) -> Round:
        return self._apply(
            "save_and_lock_bids",
            index,
            lambda rd, players: engine.save_and_lock_bids(rd, players, bids),
        )

    def save_and_finalize(
        self, index: int, actuals: Mapping[str, Optional[int]]
    ) -> Round:
        return self._apply(
            "save_and_finalize",
            index,
            lambda rd, players: engine.save_and_finalize(rd, players, actuals),
        )

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def round(self, index: int) -> Round:
        session = self._require_session()
        self._check_index(session, index)
        return session.rounds[index]

    def tallies(self) -> Tallies:
        session = self._require_session()
        return compute_tallies(session.rounds, session.players)

    def leaders(self) -> Set[str]:
        return find_leaders(self.tallies().cumulative)

    def crowned_leaders(self) -> Set[str]:
        return crowned_leaders(self.tallies())

    def current_round_index(self) -> Optional[int]:
        return engine.current_round_index(self._require_session().rounds)

    def commander(self, index: int) -> Player:
        session = self._require_session()
        self._check_index(session, index)
        return engine.commander_for(session.players, index)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _apply(
        self,
        event: str,
        index: int,
        operation: Callable[[Round, List[Player]], Round],
    ) -> Round:
        session = self._require_session()
        self._check_index(session, index)
        before = session.rounds[index]
        after = operation(before, session.players)
        session.rounds[index] = after

        applied = after != before
        if after.phase != before.phase:
            logger.info(
                "Round %d: %s -> %s%s",
                after.r,
                before.phase.value,
                after.phase.value,
                f" ({self.game_label})" if self.game_label else "",
            )
        self._log(event, after, applied=applied, before=before)
        return after

    def _log(
        self,
        event: str,
        round_state: Optional[Round],
        *,
        applied: bool,
        before: Optional[Round] = None,
    ) -> None:
        if self.transition_logger is None:
            return
        if round_state is None:
            self.transition_logger.log_event(
                event=event,
                game_id=self.game_label,
                round_number=None,
                applied=applied,
                note="Players: " + ", ".join(p.name for p in self.players),
            )
            return
        self.transition_logger.log_event(
            event=event,
            game_id=self.game_label,
            round_number=round_state.r,
            applied=applied,
            phase_before=before.phase.value if before is not None else None,
            phase_after=round_state.phase.value,
            bids=round_state.bids,
            actuals=round_state.actuals,
        )

    def _require_session(self) -> Session:
        if self.session is None:
            raise RuntimeError("No session started")
        return self.session

    def _require_setup(self, action: str) -> None:
        if self.session is not None:
            raise RuntimeError(f"{action} is only allowed before the game starts")

    @staticmethod
    def _check_index(session: Session, index: int) -> None:
        if not 0 <= index < session.round_count:
            raise IndexError(
                f"Round index {index} out of range for {session.round_count} rounds"
            )
