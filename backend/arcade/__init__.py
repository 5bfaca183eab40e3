import logging

from flask import Flask

from .config import DevConfig
from .core.loader import GameData
from .domain.scheduler import ManualScheduler
from .extensions import cors, socketio
from .infrastructure.memory.stats import InMemoryStatsSink
from .infrastructure.scheduler import SocketIOScheduler
from .services.game_service import GameService
from .sockets import register_socket_events


def _scheduler_factory(kind: str):
    if kind == "manual":
        return lambda wrap: ManualScheduler()
    if kind == "socketio":
        return lambda wrap: SocketIOScheduler(socketio, wrap)
    raise ValueError(f"Unknown scheduler '{kind}'")


def create_app(config_object=DevConfig):
    app = Flask(__name__)
    app.config.from_object(config_object)
    logging.basicConfig(level=app.config["ARCADE_LOG_LEVEL"])

    # ── extensions ─────────────────────────────────────────────
    cors.init_app(app, resources={r"/*": {"origins": "*"}})
    socketio.init_app(
        app,
        async_mode=app.config["SOCKETIO_ASYNC_MODE"],
        cors_allowed_origins="*",
    )

    # ── services ───────────────────────────────────────────────
    service = GameService(
        GameData(app.config["ARCADE_DATA_DIR"]),
        InMemoryStatsSink(),
        _scheduler_factory(app.config["ARCADE_SCHEDULER"]),
        seed=app.config["ARCADE_SEED"],
    )
    app.extensions["arcade"] = service

    # ── socket events ──────────────────────────────────────────
    register_socket_events(socketio, service)
    return app


__all__ = ["create_app", "socketio"]
