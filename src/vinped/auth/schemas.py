from __future__ import annotations

import re
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from vinped.wallets.schemas import WalletPublic

_PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must contain at least one special character"),
)


def password_problems(password: str) -> list[str]:
    return [message for pattern, message in _PASSWORD_RULES if not pattern.search(password)]


class UserPublic(BaseModel):
    id: UUID
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class RegisterRequest(BaseModel):
    name: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=8, max_length=256)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if len(v.strip()) < 3:
            raise ValueError("Name must be at least 3 characters")
        return v.strip()

    @field_validator("password")
    @classmethod
    def _password_strength(cls, v: str) -> str:
        problems = password_problems(v)
        if problems:
            raise ValueError("; ".join(problems))
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=256)


class AuthResponse(BaseModel):
    user: UserPublic
    token: str


class RegisterResponse(AuthResponse):
    wallet: WalletPublic


class MeResponse(BaseModel):
    user: UserPublic


class LogoutResponse(BaseModel):
    success: bool = True
    message: str = "Logged out"
