"""
Insta Clone backend: REST API over MongoDB plus Socket.IO presence.

Serve with (threaded Socket.IO):
    python app.py
or behind a WSGI server that supports WebSockets, e.g.
    gunicorn -w 1 --threads 100 -b 0.0.0.0:8000 app:app
"""

import logging

from flask import Flask
from flask_cors import CORS

from . import config
from .api import register_api
from .db import init_db
from .presence import init_presence, socketio
from .responses import register_error_handlers
from .uploads import init_uploads

__all__ = ["create_app", "socketio"]

logger = logging.getLogger("insta-clone")


def create_app(overrides=None, mongo_client=None, presence_store=None):
    app = Flask(__name__, static_folder=None)
    app.config.update(config.defaults())
    if overrides:
        app.config.update(overrides)

    # Logging
    logging.basicConfig(level=app.config["LOG_LEVEL"])

    # CORS
    CORS(app, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}}, supports_credentials=True)

    register_error_handlers(app)
    init_db(app, mongo_client)
    init_uploads(app)
    init_presence(app, presence_store)
    register_api(app)

    @app.after_request
    def set_security_headers(response):
        # Basic security headers; tune for your deployment
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "no-referrer-when-downgrade")
        response.headers.setdefault("Content-Security-Policy", "default-src 'none'; frame-ancestors 'none'")
        return response

    logger.info("API mounted at %s", app.config["API_VERSION"])
    return app
