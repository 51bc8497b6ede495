import datetime
import logging

from bson.objectid import ObjectId
from bson.errors import InvalidId
from flask import current_app
from pymongo import ASCENDING, DESCENDING, MongoClient

from .responses import ValidationError

logger = logging.getLogger("insta-clone")

USERS = "users"
POSTS = "posts"
COMMENTS = "comments"
CONVERSATIONS = "conversations"
MESSAGES = "messages"


# -----------------------
# Database helpers
# -----------------------
def init_db(app, client=None):
    """
    Attach a MongoClient to the app. Pass ``client`` to reuse an existing
    one (tests hand in a mongomock client).
    """
    if client is None:
        client = MongoClient(app.config["MONGO_URL"])
    app.extensions["mongo"] = client
    db = client[app.config["DB_NAME"]]
    create_indexes(db)
    logger.info("Database ready: %s", app.config["DB_NAME"])
    return db


def get_db():
    return current_app.extensions["mongo"][current_app.config["DB_NAME"]]


def create_indexes(db):
    db[USERS].create_index([("userName", ASCENDING)], unique=True)
    db[USERS].create_index([("email", ASCENDING)], unique=True)
    db[POSTS].create_index([("author", ASCENDING), ("createdAt", DESCENDING)])
    db[POSTS].create_index([("createdAt", DESCENDING)])
    db[COMMENTS].create_index([("post", ASCENDING), ("createdAt", ASCENDING)])
    db[CONVERSATIONS].create_index([("pairKey", ASCENDING)], unique=True)
    db[MESSAGES].create_index([("senderId", ASCENDING), ("receiverId", ASCENDING)])


def utcnow():
    return datetime.datetime.now(datetime.timezone.utc)


def parse_object_id(value: str, what: str = "id") -> ObjectId:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise ValidationError(f"Invalid {what}")


def pair_key(a: ObjectId, b: ObjectId) -> str:
    """Order-independent key for a two-user conversation."""
    return ":".join(sorted((str(a), str(b))))


# -----------------------
# Serializers
# -----------------------
def _iso(value):
    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=datetime.timezone.utc)
        return value.isoformat()
    return value


def _ids(values):
    return [str(v) for v in values or []]


def user_summary(doc):
    if doc is None:
        return None
    return {
        "_id": str(doc["_id"]),
        "userName": doc.get("userName"),
        "fullName": doc.get("fullName"),
        "profilePicture": doc.get("profilePicture", ""),
    }


def user_to_dict(doc):
    """Public view of a user; the password hash and tokens never leave here."""
    if doc is None:
        return None
    return {
        "_id": str(doc["_id"]),
        "userName": doc.get("userName"),
        "email": doc.get("email"),
        "fullName": doc.get("fullName"),
        "bio": doc.get("bio", ""),
        "gender": doc.get("gender"),
        "profilePicture": doc.get("profilePicture", ""),
        "followers": _ids(doc.get("followers")),
        "following": _ids(doc.get("following")),
        "posts": _ids(doc.get("posts")),
        "bookmarks": _ids(doc.get("bookmarks")),
        "isVerified": doc.get("isVerified", False),
        "createdAt": _iso(doc.get("createdAt")),
        "updatedAt": _iso(doc.get("updatedAt")),
    }


def post_to_dict(doc, author=None, viewer_id=None):
    if doc is None:
        return None
    likes = _ids(doc.get("likes"))
    return {
        "_id": str(doc["_id"]),
        "caption": doc.get("caption", ""),
        "images": list(doc.get("images", [])),
        "author": user_summary(author) if author else str(doc["author"]),
        "likes": likes,
        "likesCount": len(likes),
        "comments": _ids(doc.get("comments")),
        "commentsCount": len(doc.get("comments", [])),
        "likedByMe": bool(viewer_id) and str(viewer_id) in likes,
        "createdAt": _iso(doc.get("createdAt")),
        "updatedAt": _iso(doc.get("updatedAt")),
    }


def comment_to_dict(doc, author=None):
    return {
        "_id": str(doc["_id"]),
        "text": doc["text"],
        "author": user_summary(author) if author else str(doc["author"]),
        "post": str(doc["post"]),
        "createdAt": _iso(doc.get("createdAt")),
        "updatedAt": _iso(doc.get("updatedAt")),
    }


def message_to_dict(doc):
    return {
        "_id": str(doc["_id"]),
        "senderId": str(doc["senderId"]),
        "receiverId": str(doc["receiverId"]),
        "message": doc["message"],
        "createdAt": _iso(doc.get("createdAt")),
        "updatedAt": _iso(doc.get("updatedAt")),
    }


def conversation_to_dict(doc, messages=None):
    return {
        "_id": str(doc["_id"]) if doc.get("_id") else None,
        "participants": _ids(doc.get("participants")),
        "messages": [message_to_dict(m) for m in messages or []],
        "createdAt": _iso(doc.get("createdAt")),
        "updatedAt": _iso(doc.get("updatedAt")),
    }
