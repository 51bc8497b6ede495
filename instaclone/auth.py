import functools
from typing import Optional

import jwt
from bson.objectid import ObjectId
from flask import g, request

from .db import USERS, get_db
from .responses import AuthenticationError
from .security import SessionClaims, bearer_token, verify_token

ACCESS_COOKIE = "access_token"


def extract_access_token(req) -> Optional[str]:
    return bearer_token(req.headers.get("Authorization")) or req.cookies.get(ACCESS_COOKIE) or None


def authenticate(req) -> SessionClaims:
    token = extract_access_token(req)
    if not token:
        raise AuthenticationError("Unauthorized. Access token required.")
    try:
        return verify_token(token)
    except jwt.InvalidTokenError:
        raise AuthenticationError("Unauthorized. Invalid or expired access token.")


def login_required(f):
    """Verify the access token once; handlers read ``g.claims`` / ``g.current_user``."""
    @functools.wraps(f)
    def wrapper(*args, **kwargs):
        claims = authenticate(request)
        user = None
        if ObjectId.is_valid(claims.user_id):
            user = get_db()[USERS].find_one({"_id": ObjectId(claims.user_id)})
        if not user:
            raise AuthenticationError("Please log in again and try later")
        g.claims = claims
        g.current_user = user
        return f(*args, **kwargs)
    return wrapper
