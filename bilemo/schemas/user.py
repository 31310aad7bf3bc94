from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field

from bilemo.schemas.base import ApiModel


class UserCreate(ApiModel):
    email: EmailStr
    first_name: str = Field(..., min_length=3, max_length=255)
    last_name: str = Field(..., min_length=3, max_length=255)


class UserUpdate(ApiModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=3, max_length=255)
    last_name: Optional[str] = Field(None, min_length=3, max_length=255)
