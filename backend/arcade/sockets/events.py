import logging

from flask import request
from flask_socketio import SocketIO, emit

from ..services.game_service import GameService

logger = logging.getLogger(__name__)


# ── helpers ─────────────────────────────────────────────────
def _require(data, *fields) -> dict:
    if not isinstance(data, dict) or not all(f in data for f in fields):
        raise ValueError("Missing required fields")
    return data


def _update(service: GameService, snap: dict) -> dict:
    return {"game": snap, "plays": service.plays()}


# ───────────────── events ──────────────────────────────────
def register_events(sio: SocketIO, service: GameService):
    # ticks from the scheduler land here, outside any request context
    def push_tick(sid: str, snap: dict) -> None:
        sio.emit("game_updated", _update(service, snap), room=sid)

    service.on_tick = push_tick

    # ---------- connect / disconnect -----------------------
    @sio.event
    def connect(auth=None):
        logger.info("[connect] %s", request.sid)

    @sio.event
    def disconnect(reason=None):
        logger.info("[disconnect] %s", request.sid)
        service.disconnect(request.sid)

    # ---------- selection ----------------------------------
    @sio.on("select_game")
    def select_game(data):
        try:
            _require(data, "game")
            snap = service.select_game(request.sid, data["game"], data.get("difficulty"))
        except ValueError as e:
            return emit("error", {"message": str(e)})

        if snap["game"] is None:
            return emit("game_not_found", {"game_id": data["game"]}, room=request.sid)
        emit("game_selected", _update(service, snap), room=request.sid)

    @sio.on("leave_game")
    def leave_game(_data=None):
        service.leave_game(request.sid)
        emit("game_left", {}, room=request.sid)

    # ---------- gameplay -----------------------------------
    @sio.on("game_action")
    def game_action(data):
        try:
            _require(data, "action")
            logger.debug("[game_action] %s %s", request.sid, data)
            snap = service.execute_game_action(request.sid, data["action"], data.get("payload"))
        except ValueError as e:
            return emit("error", {"message": str(e)})
        emit("game_updated", _update(service, snap), room=request.sid)

    @sio.on("swipe")
    def swipe(data):
        try:
            _require(data, "start", "end")
            snap = service.swipe(request.sid, data["start"], data["end"])
        except ValueError as e:
            return emit("error", {"message": str(e)})
        emit("game_updated", _update(service, snap), room=request.sid)

    @sio.on("get_snapshot")
    def get_snapshot(_data=None):
        snap = service.get_game_snapshot(request.sid)
        if not snap:
            return emit("error", {"message": "No game selected"})
        emit("game_updated", _update(service, snap), room=request.sid)
