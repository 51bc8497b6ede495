from ..db import COMMENTS, POSTS, USERS, comment_to_dict, get_db, utcnow
from .posts import get_post


def add_comment(author, post_id: str, data):
    post = get_post(post_id)
    now = utcnow()
    doc = {
        "text": data.text,
        "author": author["_id"],
        "post": post["_id"],
        "createdAt": now,
        "updatedAt": now,
    }
    db = get_db()
    doc["_id"] = db[COMMENTS].insert_one(doc).inserted_id
    db[POSTS].update_one({"_id": post["_id"]}, {"$push": {"comments": doc["_id"]}, "$set": {"updatedAt": now}})
    return comment_to_dict(doc, author=author)


def list_comments(post_id: str):
    post = get_post(post_id)
    db = get_db()
    comments = list(db[COMMENTS].find({"post": post["_id"]}).sort([("createdAt", 1), ("_id", 1)]))
    authors = {u["_id"]: u for u in db[USERS].find({"_id": {"$in": list({c["author"] for c in comments})}})}
    return [comment_to_dict(c, author=authors.get(c["author"])) for c in comments]
