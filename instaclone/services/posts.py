from flask import current_app

from ..db import POSTS, USERS, get_db, parse_object_id, post_to_dict, utcnow
from ..responses import NotFoundError, ValidationError
from ..uploads import POST_FOLDER, upload_images
from .users import get_user_by_username


def get_post(post_id: str):
    post = get_db()[POSTS].find_one({"_id": parse_object_id(post_id, "post id")})
    if not post:
        raise NotFoundError("Post not found")
    return post


def _with_authors(posts, viewer_id=None):
    posts = list(posts)
    author_ids = list({p["author"] for p in posts})
    authors = {u["_id"]: u for u in get_db()[USERS].find({"_id": {"$in": author_ids}})}
    return [post_to_dict(p, author=authors.get(p["author"]), viewer_id=viewer_id) for p in posts]


def create_post(author, data, images):
    # nothing is uploaded or written until the image list checks out
    if not images:
        raise ValidationError("No image found")
    if len(images) > current_app.config["MAX_POST_IMAGES"]:
        raise ValidationError(f"A post can have at most {current_app.config['MAX_POST_IMAGES']} images")

    urls = upload_images(images, POST_FOLDER)
    now = utcnow()
    doc = {
        "caption": data.caption,
        "images": urls,
        "author": author["_id"],
        "likes": [],
        "comments": [],
        "createdAt": now,
        "updatedAt": now,
    }
    db = get_db()
    doc["_id"] = db[POSTS].insert_one(doc).inserted_id
    db[USERS].update_one({"_id": author["_id"]}, {"$push": {"posts": doc["_id"]}})
    return post_to_dict(doc, author=author, viewer_id=author["_id"])


def list_posts(page, viewer_id=None):
    cursor = get_db()[POSTS].find({}).sort([("createdAt", -1), ("_id", -1)]).skip(page.offset).limit(page.limit)
    return _with_authors(cursor, viewer_id)


def list_user_posts(user_name: str, page, viewer_id=None):
    user = get_user_by_username(user_name)
    cursor = (
        get_db()[POSTS]
        .find({"author": user["_id"]})
        .sort([("createdAt", -1), ("_id", -1)])
        .skip(page.offset)
        .limit(page.limit)
    )
    return [post_to_dict(p, author=user, viewer_id=viewer_id) for p in cursor]


def _toggle_member(collection, doc_id, field, member):
    """
    Flip ``member`` in the array ``field``. Each branch is a conditional
    single-document update, so two racing togglers never leave a duplicate.
    Returns True when the member is now present.
    """
    now = utcnow()
    added = collection.update_one(
        {"_id": doc_id, field: {"$ne": member}},
        {"$addToSet": {field: member}, "$set": {"updatedAt": now}},
    )
    if added.modified_count:
        return True
    collection.update_one(
        {"_id": doc_id, field: member},
        {"$pull": {field: member}, "$set": {"updatedAt": now}},
    )
    return False


def toggle_like(user, post_id: str):
    post = get_post(post_id)
    posts = get_db()[POSTS]
    liked = _toggle_member(posts, post["_id"], "likes", user["_id"])
    likes = posts.find_one({"_id": post["_id"]}, {"likes": 1}).get("likes", [])
    return {"liked": liked, "likesCount": len(likes)}


def toggle_bookmark(user, post_id: str):
    post = get_post(post_id)
    bookmarked = _toggle_member(get_db()[USERS], user["_id"], "bookmarks", post["_id"])
    return {"bookmarked": bookmarked}
