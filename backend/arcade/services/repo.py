from __future__ import annotations
from typing import Dict, Optional


class InMemorySessionRepo:
    """Play sessions keyed by socket id (process memory only)."""

    def __init__(self):
        self.sessions: Dict[str, object] = {}

    def add(self, sid: str, session) -> None:
        self.sessions[sid] = session

    def get(self, sid: str) -> Optional[object]:
        return self.sessions.get(sid)

    def remove(self, sid: str):
        return self.sessions.pop(sid, None)
