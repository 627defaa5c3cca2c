from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from authme.domain.users.entities import PublicUser
from authme.domain.users.rules import USERNAME_MIN_LENGTH, looks_like_email

PASSWORD_MIN_LENGTH = 6

CREDENTIAL_MESSAGE = "Please provide a valid email or username."
PASSWORD_MESSAGE = "Please provide a password"
EMAIL_MESSAGE = "Please provide a valid email."
USERNAME_MESSAGE = f"Please provide a username with at least {USERNAME_MIN_LENGTH} characters."
USERNAME_EMAIL_MESSAGE = "Username cannot be an email."
PASSWORD_LENGTH_MESSAGE = f"Password must be {PASSWORD_MIN_LENGTH} characters or more."


def _present(value: Any, error_type: str, message: str) -> Any:
    # falsy values ("", None, 0, False) count as missing
    if not value:
        raise PydanticCustomError(error_type, message)
    # JSON scalars are read as their text form
    if isinstance(value, bool):
        return "true"
    if isinstance(value, (int, float)):
        return str(value)
    if not isinstance(value, str):
        raise PydanticCustomError(error_type, message)
    return value


class LoginRequestDTO(BaseModel):
    credential: str = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True)

    model_config = ConfigDict(extra="ignore")

    @field_validator("credential", mode="before")
    @classmethod
    def validate_credential(cls, value: Any) -> Any:
        return _present(value, "credential_missing", CREDENTIAL_MESSAGE)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, value: Any) -> Any:
        return _present(value, "password_missing", PASSWORD_MESSAGE)


class SignupRequestDTO(BaseModel):
    email: str = Field(default="", validate_default=True)
    username: str = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True)

    model_config = ConfigDict(extra="ignore")

    @field_validator("email", mode="before")
    @classmethod
    def validate_email_present(cls, value: Any) -> Any:
        return _present(value, "email_missing", EMAIL_MESSAGE)

    @field_validator("email")
    @classmethod
    def validate_email_shape(cls, value: str) -> str:
        if not looks_like_email(value):
            raise PydanticCustomError("email_invalid", EMAIL_MESSAGE)
        return value

    @field_validator("username", mode="before")
    @classmethod
    def validate_username_present(cls, value: Any) -> Any:
        return _present(value, "username_missing", USERNAME_MESSAGE)

    @field_validator("username")
    @classmethod
    def validate_username_shape(cls, value: str) -> str:
        if len(value) < USERNAME_MIN_LENGTH:
            raise PydanticCustomError("username_too_short", USERNAME_MESSAGE)
        if looks_like_email(value):
            raise PydanticCustomError("username_is_email", USERNAME_EMAIL_MESSAGE)
        return value

    @field_validator("password", mode="before")
    @classmethod
    def validate_password_present(cls, value: Any) -> Any:
        return _present(value, "password_missing", PASSWORD_LENGTH_MESSAGE)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, value: str) -> str:
        if len(value) < PASSWORD_MIN_LENGTH:
            raise PydanticCustomError("password_too_short", PASSWORD_LENGTH_MESSAGE)
        return value


class UserResponseDTO(BaseModel):
    id: int
    username: str
    email: str

    @classmethod
    def from_user(cls, user: PublicUser) -> UserResponseDTO:
        return cls(id=user.id, username=user.username, email=user.email)


class MessageDTO(BaseModel):
    message: str = "Success"
