"""In-memory stand-in for the stats collaborator."""

from __future__ import annotations
import threading


class InMemoryStatsSink:
    def __init__(self):
        self._lock = threading.Lock()
        self.plays = 0

    # ── StatsSink ───────────────────────────────────────────────
    def record_play(self) -> None:
        with self._lock:
            self.plays += 1
