# bidboard/event_log.py
from __future__ import annotations

from pathlib import Path
from threading import Lock
from typing import Dict, List, Optional


class TransitionLogger:
    """Accumulates a plain-text record of every scorekeeper event."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._entries: List[str] = []
        self._lock = Lock()

    def log_event(
        self,
        *,
        event: str,
        game_id: Optional[str],
        round_number: Optional[int],
        applied: bool,
        phase_before: Optional[str] = None,
        phase_after: Optional[str] = None,
        bids: Optional[Dict[str, Optional[int]]] = None,
        actuals: Optional[Dict[str, Optional[int]]] = None,
        note: Optional[str] = None,
    ) -> None:
        header_parts = [f"Event: {event}"]
        if game_id is not None:
            header_parts.append(f"Game: {game_id}")
        if round_number is not None:
            header_parts.append(f"Round: {round_number}")
        header_parts.append(f"Result: {'applied' if applied else 'ignored'}")
        header = " | ".join(header_parts)

        lines = [f"=== {header} ==="]
        if phase_before is not None or phase_after is not None:
            lines.append(f"Phase: {phase_before} -> {phase_after}")
        if bids is not None:
            lines.append(f"Bids: {_format_entries(bids)}")
        if actuals is not None:
            lines.append(f"Actuals: {_format_entries(actuals)}")
        if note:
            lines.append(note.strip())

        entry = "\n".join(lines).strip()
        with self._lock:
            self._entries.append(entry)

    @property
    def entries(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def flush(self) -> None:
        with self._lock:
            if not self._entries:
                return
            to_write = "\n\n".join(self._entries)
            self._entries.clear()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(to_write + "\n\n")


def _format_entries(entries: Dict[str, Optional[int]]) -> str:
    return ", ".join(
        f"{pid}={'-' if value is None else value}"
        for pid, value in entries.items()
    )
