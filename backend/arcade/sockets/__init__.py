from flask_socketio import SocketIO

from ..services.game_service import GameService
from .events import register_events


def register_socket_events(socketio: SocketIO, service: GameService):
    register_events(socketio, service)
