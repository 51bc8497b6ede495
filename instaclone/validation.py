"""
Typed request inputs. Each model is validated before any domain logic runs;
``parse`` turns the first pydantic error into a ``ValidationError``.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from .responses import ValidationError

EMAIL_RE = re.compile(r"^[\w\.-]+@[a-zA-Z\d\.-]+\.[a-zA-Z]{2,}$")
# lower, upper, digit and one of @$!%*?&#+, 8-32 characters
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&#+])[A-Za-z\d@$!%*?&#+]{8,32}$")
GENDERS = ("male", "female")


def validate_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def validate_password(password: str) -> bool:
    return bool(PASSWORD_RE.match(password or ""))


class _Input(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_default=True, str_strip_whitespace=True)


def parse(model, data):
    try:
        return model.model_validate(data or {})
    except PydanticValidationError as e:
        raise ValidationError(_first_message(e))


def _first_message(exc: PydanticValidationError) -> str:
    err = exc.errors()[0]
    if err["type"] == "value_error":
        return str(err["ctx"]["error"])
    field = ".".join(str(part) for part in err["loc"])
    return f"{field}: {err['msg']}" if field else err["msg"]


class SignupInput(_Input):
    email: str = ""
    password: str = ""
    full_name: str = Field(default="", alias="fullName")
    user_name: str = Field(default="", alias="userName")

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        if not validate_email(v):
            raise ValueError("Invalid email format")
        return v.lower()

    @field_validator("password")
    @classmethod
    def _password(cls, v):
        if not validate_password(v):
            raise ValueError("Invalid password format")
        return v

    @field_validator("full_name")
    @classmethod
    def _full_name(cls, v):
        if not v:
            raise ValueError("Full name is required")
        return v

    @field_validator("user_name")
    @classmethod
    def _user_name(cls, v):
        if not v:
            raise ValueError("Username is required")
        return v


class LoginInput(_Input):
    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def _email(cls, v):
        if not validate_email(v):
            raise ValueError("Invalid email format")
        return v.lower()

    @field_validator("password")
    @classmethod
    def _password(cls, v):
        if not v:
            raise ValueError("Password is required")
        return v


class ProfileUpdateInput(_Input):
    full_name: Optional[str] = Field(default=None, alias="fullName")
    bio: Optional[str] = None
    gender: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def _full_name(cls, v):
        if v is not None and not v:
            raise ValueError("Full name cannot be empty")
        return v

    @field_validator("gender")
    @classmethod
    def _gender(cls, v):
        if v in (None, ""):
            return None
        v = v.lower()
        if v not in GENDERS:
            raise ValueError("Gender must be male or female")
        return v


class PostInput(_Input):
    caption: str = ""


class CommentInput(_Input):
    text: str = ""

    @field_validator("text")
    @classmethod
    def _text(cls, v):
        if not v:
            raise ValueError("Comment text is required")
        return v


class MessageInput(_Input):
    message: str = ""

    @field_validator("message")
    @classmethod
    def _message(cls, v):
        if not v:
            raise ValueError("Nothing to send")
        return v


class PageInput(_Input):
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT)
    offset: int = Field(default=0, ge=0)
