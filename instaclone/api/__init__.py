from flask import Blueprint

from ..responses import success
from . import messages, posts, users

bp = Blueprint("api", __name__)
bp.register_blueprint(users.bp)
bp.register_blueprint(posts.bp)
bp.register_blueprint(messages.bp)


@bp.route("", methods=["GET"])
@bp.route("/", methods=["GET"])
def index():
    return success("Successfully initialized the Insta Clone app")


def register_api(app):
    app.register_blueprint(bp, url_prefix=app.config["API_VERSION"])
