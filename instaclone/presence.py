"""
Online presence over Socket.IO.

Clients connect with ``?userId=<id>``. Every connect and disconnect
broadcasts ``getOnlineUser`` with the ids currently connected.

Known gaps: one socket id is kept per user (a second tab replaces the first),
and a connection that drops without a disconnect event stays listed until the
transport notices.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import List, Optional

from flask import current_app, request
from flask_socketio import SocketIO

logger = logging.getLogger("insta-clone.presence")

socketio = SocketIO()

ONLINE_USERS_EVENT = "getOnlineUser"
NEW_MESSAGE_EVENT = "newMessage"


class PresenceStore(ABC):
    """Where connected user ids live. Swap for a shared store to go multi-node."""

    @abstractmethod
    def add(self, user_id: str, sid: str) -> None:
        ...

    @abstractmethod
    def remove(self, user_id: str) -> Optional[str]:
        ...

    @abstractmethod
    def get(self, user_id: str) -> Optional[str]:
        ...

    @abstractmethod
    def snapshot(self) -> List[str]:
        ...


class InMemoryPresenceStore(PresenceStore):
    def __init__(self):
        self._lock = threading.Lock()
        self._sockets = {}

    def add(self, user_id, sid):
        with self._lock:
            self._sockets[user_id] = sid

    def remove(self, user_id):
        with self._lock:
            return self._sockets.pop(user_id, None)

    def get(self, user_id):
        with self._lock:
            return self._sockets.get(user_id)

    def snapshot(self):
        with self._lock:
            return list(self._sockets)

    def __len__(self):
        with self._lock:
            return len(self._sockets)


def get_presence() -> PresenceStore:
    return current_app.extensions["presence"]


def socket_id_for(user_id: str) -> Optional[str]:
    return get_presence().get(str(user_id))


def emit_online_users():
    socketio.emit(ONLINE_USERS_EVENT, get_presence().snapshot())


def notify_user(user_id: str, event: str, payload) -> bool:
    """Push an event to a user's socket if they are online."""
    sid = socket_id_for(user_id)
    if not sid:
        return False
    socketio.emit(event, payload, to=sid)
    return True


# -----------------------
# Socket handlers
# -----------------------
@socketio.on("connect")
def on_connect(auth=None):
    user_id = request.args.get("userId")
    if not user_id:
        logger.info("Socket %s refused: no userId in handshake", request.sid)
        return False
    get_presence().add(user_id, request.sid)
    logger.info("User connected - ID: %s, Socket: %s", user_id, request.sid)
    emit_online_users()


@socketio.on("disconnect")
def on_disconnect(reason=None):
    user_id = request.args.get("userId")
    if not user_id:
        return
    get_presence().remove(user_id)
    logger.info("User disconnected - ID: %s", user_id)
    emit_online_users()


def init_presence(app, store: Optional[PresenceStore] = None):
    app.extensions["presence"] = store or InMemoryPresenceStore()
    origins = app.config["SOCKET_CORS_ORIGINS"]
    if origins != "*":
        origins = [o.strip() for o in origins.split(",") if o.strip()]
    socketio.init_app(app, cors_allowed_origins=origins)
