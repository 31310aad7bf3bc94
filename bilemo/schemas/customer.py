from __future__ import annotations

import re
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from bilemo.schemas.base import ApiModel

ROLE_PATTERN = re.compile(r"^ROLE_[A-Z_]+$")


def _validate_roles(value: list[str] | None) -> list[str] | None:
    if value is None:
        return value
    cleaned = []
    for role in value:
        candidate = role.strip().upper()
        if not ROLE_PATTERN.match(candidate):
            raise ValueError(f"The role {role} is not valid.")
        if candidate not in cleaned:
            cleaned.append(candidate)
    return cleaned


class CustomerCreate(ApiModel):
    name: str = Field(..., min_length=3, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=255)
    roles: list[str] = Field(default_factory=list)
    user_id: Optional[int] = None

    @field_validator("roles")
    @classmethod
    def validate_roles(cls, value: list[str]) -> list[str]:
        return _validate_roles(value)


class CustomerUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=3, max_length=255)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1, max_length=255)
    roles: Optional[list[str]] = None
    user_id: Optional[int] = None

    @field_validator("roles")
    @classmethod
    def validate_roles(cls, value: list[str] | None) -> list[str] | None:
        return _validate_roles(value)
