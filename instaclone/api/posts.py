from flask import Blueprint, g, request

from ..auth import login_required
from ..responses import success
from ..security import decode_token
from ..services import comments as comment_service
from ..services import posts as service
from ..validation import CommentInput, PageInput, PostInput, parse

bp = Blueprint("post", __name__, url_prefix="/post")


def _viewer_id():
    # display hint only (likedByMe); public listings never trust it
    claims = decode_token(request) or {}
    data = claims.get("userData")
    return data.get("userId") if isinstance(data, dict) else None


@bp.route("/create-post", methods=["POST"])
@login_required
def create_post():
    data = parse(PostInput, request.form.to_dict())
    post = service.create_post(g.current_user, data, request.files.getlist("image"))
    return success("Successfully created post", post, 201)


@bp.route("/all-posts", methods=["GET"])
def all_posts():
    page = parse(PageInput, request.args.to_dict())
    return success("All posts", service.list_posts(page, viewer_id=_viewer_id()))


@bp.route("/user-posts/<user_name>", methods=["GET"])
def user_posts(user_name):
    page = parse(PageInput, request.args.to_dict())
    return success("User posts", service.list_user_posts(user_name, page, viewer_id=_viewer_id()))


@bp.route("/like-unlike/<post_id>", methods=["PUT"])
@login_required
def like_unlike(post_id):
    result = service.toggle_like(g.current_user, post_id)
    return success("Post liked" if result["liked"] else "Post unliked", result)


@bp.route("/bookmark/<post_id>", methods=["PUT"])
@login_required
def bookmark(post_id):
    result = service.toggle_bookmark(g.current_user, post_id)
    return success("Post bookmarked" if result["bookmarked"] else "Bookmark removed", result)


@bp.route("/<post_id>/comments", methods=["POST"])
@login_required
def add_comment(post_id):
    data = parse(CommentInput, request.get_json(silent=True))
    comment = comment_service.add_comment(g.current_user, post_id, data)
    return success("Comment added", comment, 201)


@bp.route("/<post_id>/comments", methods=["GET"])
def list_comments(post_id):
    return success("Comments", comment_service.list_comments(post_id))
