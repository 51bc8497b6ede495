import logging

from flask import current_app
from pymongo.errors import DuplicateKeyError, PyMongoError

from ..db import POSTS, USERS, get_db, post_to_dict, user_summary, user_to_dict, utcnow
from ..responses import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..security import hash_password, issue_token, verify_password
from ..uploads import PROFILE_EXTENSIONS, PROFILE_FOLDER, upload_image

logger = logging.getLogger("insta-clone")

INVALID_LOGIN = "Invalid username or password"


def new_user_document(data, password_hash):
    now = utcnow()
    return {
        "userName": data.user_name,
        "email": data.email,
        "password": password_hash,
        "fullName": data.full_name,
        "profilePicture": "",
        "bio": "",
        "followers": [],
        "following": [],
        "posts": [],
        "bookmarks": [],
        "isVerified": False,
        "createdAt": now,
        "updatedAt": now,
    }


def get_user_by_username(user_name: str):
    user = get_db()[USERS].find_one({"userName": user_name})
    if not user:
        raise NotFoundError("User not found")
    return user


# -----------------------
# Accounts
# -----------------------
def signup(data):
    users = get_db()[USERS]
    if users.find_one({"$or": [{"email": data.email}, {"userName": data.user_name}]}):
        raise ConflictError("Already registered, please login")

    doc = new_user_document(data, hash_password(data.password))
    try:
        doc["_id"] = users.insert_one(doc).inserted_id
    except DuplicateKeyError:
        # lost a race with a concurrent signup for the same handle/email
        raise ConflictError("Already registered, please login")
    logger.info("New user %s", data.user_name)
    return user_to_dict(doc)


def login(data):
    """Returns ``(profile, token)``. Unknown email and wrong password look the same."""
    users = get_db()[USERS]
    user = users.find_one({"email": data.email})
    if not user or not verify_password(data.password, user.get("password")):
        raise AuthenticationError(INVALID_LOGIN)

    token = issue_token({
        "userId": str(user["_id"]),
        "userName": user["userName"],
        "userEmail": user["email"],
        "isVerified": user.get("isVerified", False),
    })
    users.update_one({"_id": user["_id"]}, {"$set": {"refreshToken": token, "updatedAt": utcnow()}})
    profile = user_summary(user)
    profile["email"] = user["email"]
    profile["bio"] = user.get("bio", "")
    return profile, token


def logout(user):
    get_db()[USERS].update_one({"_id": user["_id"]}, {"$unset": {"refreshToken": ""}})


# -----------------------
# Profiles
# -----------------------
def get_profile(user_name: str, viewer):
    user = get_user_by_username(user_name)
    posts = get_db()[POSTS].find({"author": user["_id"]}).sort([("createdAt", -1), ("_id", -1)])
    profile = user_to_dict(user)
    profile["posts"] = [post_to_dict(p, author=user, viewer_id=viewer["_id"]) for p in posts]
    profile["followersCount"] = len(user.get("followers", []))
    profile["followingCount"] = len(user.get("following", []))
    profile["isFollowing"] = viewer["_id"] in user.get("followers", [])
    return profile


def update_profile(user, data, picture=None):
    changes = {}
    if data.full_name is not None:
        changes["fullName"] = data.full_name
    if data.bio is not None:
        changes["bio"] = data.bio
    if data.gender is not None:
        changes["gender"] = data.gender
    if picture is not None and picture.filename:
        changes["profilePicture"] = upload_image(picture, PROFILE_FOLDER, PROFILE_EXTENSIONS)
    if not changes:
        raise ValidationError("Nothing to update")

    changes["updatedAt"] = utcnow()
    users = get_db()[USERS]
    users.update_one({"_id": user["_id"]}, {"$set": changes})
    return user_to_dict(users.find_one({"_id": user["_id"]}))


def suggested_users(user):
    excluded = [user["_id"], *user.get("following", [])]
    cursor = (
        get_db()[USERS]
        .find({"_id": {"$nin": excluded}})
        .sort([("createdAt", -1), ("_id", -1)])
        .limit(current_app.config["SUGGESTED_USERS_LIMIT"])
    )
    return [user_summary(u) for u in cursor]


# -----------------------
# Follow graph
# -----------------------
def _check_not_self(actor, target):
    if actor["_id"] == target["_id"]:
        raise ValidationError("You can't follow or unfollow yourself")


def _link(actor_id, target_id, op):
    """Apply ``op`` ($addToSet / $pull) to both sides; undo the first if the second fails.

    Only a first update that actually changed ``following`` is undone, so a
    repeated follow or unfollow never loses the link it found in place.
    """
    undo = "$pull" if op == "$addToSet" else "$addToSet"
    users = get_db()[USERS]
    now = utcnow()
    first = users.update_one({"_id": actor_id, "following": _membership(op, target_id)},
                             {op: {"following": target_id}, "$set": {"updatedAt": now}})
    try:
        users.update_one({"_id": target_id}, {op: {"followers": actor_id}, "$set": {"updatedAt": now}})
    except PyMongoError:
        if first.modified_count:
            logger.error("Follow update failed for %s -> %s, reverting", actor_id, target_id)
            users.update_one({"_id": actor_id}, {undo: {"following": target_id}})
        raise


def _membership(op, member):
    # match only documents the operator will change
    return {"$ne": member} if op == "$addToSet" else member


def follow_user(actor, target):
    _check_not_self(actor, target)
    _link(actor["_id"], target["_id"], "$addToSet")


def unfollow_user(actor, target):
    _check_not_self(actor, target)
    _link(actor["_id"], target["_id"], "$pull")


def toggle_follow(actor, user_name: str) -> bool:
    """Follow or unfollow by handle. Returns True when now following."""
    target = get_user_by_username(user_name)
    _check_not_self(actor, target)
    fresh = get_db()[USERS].find_one({"_id": actor["_id"]}, {"following": 1})
    if target["_id"] in fresh.get("following", []):
        unfollow_user(actor, target)
        return False
    follow_user(actor, target)
    return True
