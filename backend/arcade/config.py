import os
from pathlib import Path

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def _seed(raw):
    return int(raw) if raw not in (None, "") else None


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    DEBUG = False
    ARCADE_DATA_DIR = os.getenv("ARCADE_DATA_DIR", str(DATA_DIR))
    # fixed seed makes every session replay the same boards
    ARCADE_SEED = _seed(os.getenv("ARCADE_SEED"))
    ARCADE_LOG_LEVEL = os.getenv("ARCADE_LOG_LEVEL", "INFO")
    SOCKETIO_ASYNC_MODE = os.getenv("SOCKETIO_ASYNC_MODE", "eventlet")
    # "socketio" runs timers as background tasks, "manual" leaves them to the caller
    ARCADE_SCHEDULER = os.getenv("ARCADE_SCHEDULER", "socketio")


class DevConfig(BaseConfig):
    DEBUG = True
    ARCADE_LOG_LEVEL = os.getenv("ARCADE_LOG_LEVEL", "DEBUG")


class TestConfig(BaseConfig):
    TESTING = True
    ARCADE_SEED = 7
    SOCKETIO_ASYNC_MODE = "threading"
    ARCADE_SCHEDULER = "manual"
