from flask import Blueprint, g, request

from ..auth import login_required
from ..responses import success
from ..services import messages as service
from ..validation import MessageInput, parse

bp = Blueprint("message", __name__, url_prefix="/message")


@bp.route("/send-message/user/<user_id>", methods=["POST"])
@login_required
def send_message(user_id):
    data = parse(MessageInput, request.get_json(silent=True))
    message = service.send_message(g.current_user, user_id, data)
    return success("Successfully sent message", message)


@bp.route("/conversation/user/<user_id>", methods=["GET"])
@login_required
def get_conversation(user_id):
    return success("Conversation", service.get_conversation(g.current_user, user_id))
