"""
Password hashing and session tokens.

Tokens are HS256 JWTs shaped as ``{"userData": {...}, "iat": ..., "exp": ...}``.
Reset-flow tokens (``userData.isReset``) are signed with a separate secret.
"""

import datetime
from dataclasses import dataclass
from typing import Optional

import jwt  # PyJWT
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash

SESSION_COOKIE_NAMES = ("session_token", "reset_token", "access_token")


@dataclass(frozen=True)
class SessionClaims:
    user_id: str
    user_name: str
    email: str
    is_verified: bool = False
    is_reset: bool = False

    @classmethod
    def from_payload(cls, payload: dict) -> "SessionClaims":
        data = payload.get("userData")
        if not isinstance(data, dict) or not data.get("userId"):
            raise jwt.InvalidTokenError("token carries no user data")
        return cls(
            user_id=str(data["userId"]),
            user_name=data.get("userName", ""),
            email=data.get("userEmail", ""),
            is_verified=bool(data.get("isVerified", False)),
            is_reset=bool(data.get("isReset", False)),
        )


# -----------------------
# Passwords
# -----------------------
def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password: str, hashed: Optional[str]) -> bool:
    if not hashed:
        return False
    try:
        return check_password_hash(hashed, password)
    except ValueError:
        # unknown hash method stored on the record
        return False


# -----------------------
# Tokens
# -----------------------
def _secret(reset: bool) -> str:
    return current_app.config["RESET_SECRET_KEY" if reset else "SECRET_KEY"]


def issue_token(claims: dict) -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {
        "userData": claims,
        "iat": now,
        "exp": now + datetime.timedelta(seconds=current_app.config["JWT_EXP_SECONDS"]),
    }
    return jwt.encode(
        payload,
        _secret(bool(claims.get("isReset"))),
        algorithm=current_app.config["JWT_ALGORITHM"],
    )


def verify_token(token: str, reset: bool = False) -> SessionClaims:
    """Check signature and expiry, then return typed claims.

    Raises ``jwt.InvalidTokenError`` (or a subclass) on any failure.
    """
    payload = jwt.decode(
        token,
        _secret(reset),
        algorithms=[current_app.config["JWT_ALGORITHM"]],
    )
    return SessionClaims.from_payload(payload)


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Pull the token out of ``Bearer <prefix>@<token>``."""
    if not authorization or not authorization.startswith("Bearer "):
        return None
    value = authorization[len("Bearer "):].strip()
    if "@" not in value:
        return None
    token = value.rpartition("@")[2]
    return token or None


def decode_token(request) -> Optional[dict]:
    """Read token claims WITHOUT verifying signature or expiry.

    Only for display hints; never use the result to grant access.
    """
    token = bearer_token(request.headers.get("Authorization"))
    if not token:
        for name in SESSION_COOKIE_NAMES:
            token = request.cookies.get(name)
            if token:
                break
    if not token:
        return None
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError:
        return None
