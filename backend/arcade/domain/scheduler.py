# arcade/domain/scheduler.py
from __future__ import annotations
import itertools
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Protocol

Callback = Callable[[], None]


class Scheduler(Protocol):
    """What engines need from the host's event loop.

    ``schedule`` runs ``callback`` after ``delay_ms`` (and then every
    ``delay_ms`` when ``repeat`` is true) and returns a handle for ``cancel``.
    Cancelling an unknown or already finished handle is a no-op.
    """

    def schedule(self, callback: Callback, delay_ms: int, repeat: bool = False) -> int: ...
    def cancel(self, handle: Optional[int]) -> None: ...


@dataclass
class _Job:
    handle: int
    callback: Callback
    interval: int
    due: int
    repeat: bool


class ManualScheduler:
    """Virtual clock driven by ``advance``; nothing runs on its own.

    Jobs fire in due-time order, ties broken by scheduling order, so a test
    can reproduce exactly what the server loop would do.
    """

    def __init__(self):
        self.now = 0
        self._jobs: Dict[int, _Job] = {}
        self._ids = itertools.count(1)

    def schedule(self, callback: Callback, delay_ms: int, repeat: bool = False) -> int:
        handle = next(self._ids)
        self._jobs[handle] = _Job(handle, callback, delay_ms, self.now + delay_ms, repeat)
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        if handle is not None:
            self._jobs.pop(handle, None)

    def pending(self) -> int:
        return len(self._jobs)

    def is_scheduled(self, handle: Optional[int]) -> bool:
        return handle is not None and handle in self._jobs

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing every job that falls due."""
        target = self.now + ms
        while True:
            job = self._next_due(target)
            if job is None:
                break
            self.now = job.due
            if job.repeat:
                job.due += max(job.interval, 1)
            else:
                del self._jobs[job.handle]
            job.callback()
        self.now = target

    def run_until_idle(self, limit_ms: int = 60_000) -> None:
        """Fire one-shot jobs until none remain (repeating jobs block this)."""
        deadline = self.now + limit_ms
        while self.now < deadline:
            one_shot = [job.due for job in self._jobs.values() if not job.repeat]
            if not one_shot:
                break
            self.advance(max(min(one_shot) - self.now, 0))

    def _next_due(self, target: int) -> Optional[_Job]:
        due = [job for job in self._jobs.values() if job.due <= target]
        if not due:
            return None
        return min(due, key=lambda j: (j.due, j.handle))
