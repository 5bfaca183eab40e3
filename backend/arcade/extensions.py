from flask_cors import CORS
from flask_socketio import SocketIO

cors = CORS()
# async_mode comes from config at init_app (eventlet by default)
socketio = SocketIO()
