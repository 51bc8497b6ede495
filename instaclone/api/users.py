import logging

from flask import Blueprint, current_app, g, request

from ..auth import ACCESS_COOKIE, login_required
from ..responses import success
from ..services import users as service
from ..validation import LoginInput, ProfileUpdateInput, SignupInput, parse

logger = logging.getLogger("insta-clone")

bp = Blueprint("auth", __name__, url_prefix="/auth")


def _set_access_cookie(response, token, max_age):
    response.set_cookie(
        ACCESS_COOKIE,
        token,
        max_age=max_age,
        httponly=True,
        secure=current_app.config["COOKIE_SECURE"],
        samesite="Lax",
    )


# -----------------------
# User authentication
# -----------------------
@bp.route("/signup", methods=["POST"])
def signup():
    data = parse(SignupInput, request.get_json(silent=True))
    user = service.signup(data)
    return success("User created successfully", user, 201)


@bp.route("/login", methods=["POST"])
def login():
    data = parse(LoginInput, request.get_json(silent=True))
    profile, token = service.login(data)
    response, status = success("Login successful", {"user": profile, "accessToken": token})
    _set_access_cookie(response, token, current_app.config["JWT_EXP_SECONDS"])
    return response, status


@bp.route("/accounts/logout", methods=["GET"])
@login_required
def logout():
    service.logout(g.current_user)
    logger.info("User %s logged out", g.claims.user_name)
    response, status = success("Logged out successfully")
    _set_access_cookie(response, "", 0)
    return response, status


# -----------------------
# Profiles
# -----------------------
@bp.route("/accounts/suggested-users", methods=["GET"])
@login_required
def suggested_users():
    return success("Suggested users", service.suggested_users(g.current_user))


@bp.route("/accounts/edit", methods=["PUT"])
@login_required
def update_profile():
    data = parse(ProfileUpdateInput, request.form.to_dict())
    user = service.update_profile(g.current_user, data, request.files.get("profilePicture"))
    return success("Profile updated successfully", user)


@bp.route("/accounts/follow-unfollow/<user_name>", methods=["PUT"])
@login_required
def follow_unfollow(user_name):
    following = service.toggle_follow(g.current_user, user_name)
    message = "Followed successfully" if following else "Unfollowed successfully"
    return success(message, {"following": following})


@bp.route("/<user_name>", methods=["GET"])
@login_required
def get_profile(user_name):
    return success("User profile", service.get_profile(user_name, g.current_user))
