import os

from cinemax import create_app
from cinemax.extensions import socketio

app = create_app()

if __name__ == "__main__":
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"
    socketio.run(app, debug=debug, host="0.0.0.0", port=int(os.environ.get("PORT", 5000)),
                 use_reloader=False, allow_unsafe_werkzeug=True)
