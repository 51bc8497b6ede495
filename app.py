# app.py
"""
Insta Clone backend entry point.

Configure via environment variables (see instaclone/config.py).
Run the dev server with:
    python app.py
"""

import os

from instaclone import create_app, socketio

app = create_app()

# -----------------------
# Run server (for dev only). For production use a WSGI server.
# -----------------------
if __name__ == "__main__":
    socketio.run(
        app,
        host="0.0.0.0",
        port=int(os.environ.get("PORT", 8000)),
        debug=os.environ.get("FLASK_DEBUG", "0") == "1",
        allow_unsafe_werkzeug=True,
    )
