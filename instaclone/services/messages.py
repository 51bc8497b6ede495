import logging

from pymongo import ReturnDocument

from ..db import (
    CONVERSATIONS,
    MESSAGES,
    USERS,
    conversation_to_dict,
    get_db,
    message_to_dict,
    pair_key,
    parse_object_id,
    utcnow,
)
from ..presence import NEW_MESSAGE_EVENT, notify_user
from ..responses import NotFoundError, ValidationError

logger = logging.getLogger("insta-clone")


def _other_user(sender, receiver_id: str):
    receiver_oid = parse_object_id(receiver_id, "user id")
    if receiver_oid == sender["_id"]:
        raise ValidationError("You can't message yourself")
    receiver = get_db()[USERS].find_one({"_id": receiver_oid}, {"_id": 1})
    if not receiver:
        raise NotFoundError("Receiver user doesn't exist, please try again later")
    return receiver


def get_or_create_conversation(a, b):
    """One conversation per unordered pair; the upsert on ``pairKey`` makes creation atomic."""
    now = utcnow()
    return get_db()[CONVERSATIONS].find_one_and_update(
        {"pairKey": pair_key(a, b)},
        {
            "$setOnInsert": {
                "participants": sorted([a, b], key=str),
                "messages": [],
                "createdAt": now,
            },
            "$set": {"updatedAt": now},
        },
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )


def send_message(sender, receiver_id: str, data):
    receiver = _other_user(sender, receiver_id)
    conversation = get_or_create_conversation(sender["_id"], receiver["_id"])

    now = utcnow()
    doc = {
        "senderId": sender["_id"],
        "receiverId": receiver["_id"],
        "message": data.message,
        "createdAt": now,
        "updatedAt": now,
    }
    db = get_db()
    doc["_id"] = db[MESSAGES].insert_one(doc).inserted_id
    db[CONVERSATIONS].update_one(
        {"_id": conversation["_id"]},
        {"$push": {"messages": doc["_id"]}, "$set": {"updatedAt": now}},
    )

    payload = message_to_dict(doc)
    if notify_user(str(receiver["_id"]), NEW_MESSAGE_EVENT, payload):
        logger.debug("Pushed message %s to %s", doc["_id"], receiver["_id"])
    return payload


def get_conversation(user, other_id: str):
    other = _other_user(user, other_id)
    db = get_db()
    conversation = db[CONVERSATIONS].find_one({"pairKey": pair_key(user["_id"], other["_id"])})
    if not conversation:
        return conversation_to_dict({"participants": sorted([user["_id"], other["_id"]], key=str)})
    messages = db[MESSAGES].find({"_id": {"$in": conversation.get("messages", [])}}).sort([("createdAt", 1), ("_id", 1)])
    return conversation_to_dict(conversation, list(messages))
