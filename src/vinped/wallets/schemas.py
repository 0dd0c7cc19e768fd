from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator  # type: ignore[import-not-found]


def _strip_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Name must not be blank")
    return v


class WalletPublic(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    initial_balance: float
    current_balance: float
    credit_limit: float | None = None
    current_invoice: float = 0.0
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CreateWalletRequest(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    initial_balance: float = 0.0
    credit_limit: float | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        return _strip_name(v)


class UpdateWalletRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=50)
    credit_limit: float | None = None
    is_active: bool | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str | None) -> str | None:
        return None if v is None else _strip_name(v)


class ListWalletsResponse(BaseModel):
    items: list[WalletPublic]


class DeleteWalletResponse(BaseModel):
    success: bool = True
    message: str = "Wallet deleted"
