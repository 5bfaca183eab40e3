"""Scheduler backed by Flask-SocketIO background tasks."""

from __future__ import annotations
import itertools
import logging
from typing import Callable, Dict, Optional

from flask_socketio import SocketIO

logger = logging.getLogger(__name__)


class SocketIOScheduler:
    """Each job is a background task sleeping with ``socketio.sleep``.

    Under eventlet these are green threads, so a job only gives up control
    while sleeping. ``wrap`` lets the session hold its lock around every
    callback and push a fresh snapshot afterwards.
    """

    def __init__(self, sio: SocketIO, wrap: Optional[Callable[[Callable[[], None]], None]] = None):
        self._sio = sio
        self._wrap = wrap or (lambda cb: cb())
        self._live: Dict[int, bool] = {}
        self._ids = itertools.count(1)

    def schedule(self, callback: Callable[[], None], delay_ms: int, repeat: bool = False) -> int:
        handle = next(self._ids)
        self._live[handle] = True
        self._sio.start_background_task(self._run, handle, callback, delay_ms / 1000.0, repeat)
        return handle

    def cancel(self, handle: Optional[int]) -> None:
        if handle is not None:
            self._live.pop(handle, None)

    def _run(self, handle: int, callback: Callable[[], None], delay: float, repeat: bool) -> None:
        while True:
            self._sio.sleep(delay)
            if handle not in self._live:
                return
            if not repeat:
                self._live.pop(handle, None)
            try:
                self._wrap(callback)
            except Exception:
                logger.exception("scheduled job %s failed", handle)
                self._live.pop(handle, None)
                return
            if not repeat:
                return
