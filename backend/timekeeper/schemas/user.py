# backend/timekeeper/schemas/user.py

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from timekeeper.models.user import User


# -------------------------
# blank-input helpers
# -------------------------
def _reject_blank(v: Optional[str], field_name: str) -> Optional[str]:
    """
    A missing or blank value is a ValueError (rendered as 400 by the request
    validation handler). The value itself is kept as sent.
    """
    if v is None or (isinstance(v, str) and v.strip() == ""):
        raise ValueError(f"{field_name} must be filled in")
    return v


# compared as sent: never stripped
_VERBATIM_FIELDS = frozenset({"password", "activation_token", "reset_password_token"})


def _strip_and_reject_blank(v: Optional[str], field_name: str) -> Optional[str]:
    """names and mail addresses: surrounding whitespace is dropped"""
    v = _reject_blank(v, field_name)
    if field_name in _VERBATIM_FIELDS or not isinstance(v, str):
        return v
    return v.strip()


class _Request(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ---------- request schemas (/user/*) ----------

class LoginRequest(_Request):
    """
    [request] POST /user/login
    """
    name: str
    password: str

    @field_validator("name", "password", mode="before")
    @classmethod
    def validate_filled(cls, v, info):
        return _strip_and_reject_blank(v, info.field_name)


class RegisterRequest(_Request):
    """
    [request] POST /user/register
    The email shape is checked by the service (BadMailFormatError).
    """
    name: str
    email: str
    password: str

    @field_validator("name", "email", "password", mode="before")
    @classmethod
    def validate_filled(cls, v, info):
        return _strip_and_reject_blank(v, info.field_name)


class ActivateRequest(_Request):
    """
    [request] POST /user/activate
    """
    name: str
    activation_token: str

    @field_validator("name", "activation_token", mode="before")
    @classmethod
    def validate_filled(cls, v, info):
        return _strip_and_reject_blank(v, info.field_name)


class ResetPasswordMailRequest(_Request):
    """
    [request] POST /user/reset-password-mail
    """
    email: str

    @field_validator("email", mode="before")
    @classmethod
    def validate_filled(cls, v, info):
        return _strip_and_reject_blank(v, info.field_name)


class ResetPasswordRequest(_Request):
    """
    [request] POST /user/reset-password
    """
    name: str
    reset_password_token: str
    password: str

    @field_validator("name", "reset_password_token", "password", mode="before")
    @classmethod
    def validate_filled(cls, v, info):
        return _strip_and_reject_blank(v, info.field_name)


# ---------- response schemas ----------

class UserRead(BaseModel):
    """
    [response] never exposes password / activation / reset tokens.
    token is only filled in by /user/login.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    name: str
    email: str
    active: bool
    token: Optional[str] = None
    selected_task: Optional[str] = None
    selected_project: Optional[str] = None

    @classmethod
    def from_user(cls, user: User, with_token: bool = False) -> "UserRead":
        data = user.model_dump(include={"id", "name", "email", "active", "selected_task", "selected_project"})
        if with_token:
            data["token"] = user.token
        return cls(**data)


class SuccessMessage(BaseModel):
    success: bool = True
    message: str = "Operation successful"
