"""Arcade backend entrypoint.

Serves the six mini-games over Socket.IO; run with ``python app.py`` from the
repository root (set ``PYTHONPATH=backend`` if the package is not installed).
"""

import os

from arcade import create_app, socketio

app = create_app()

if __name__ == "__main__":
    socketio.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
