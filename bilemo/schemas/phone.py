from __future__ import annotations

import re
from typing import Optional

from pydantic import Field, field_validator

from bilemo.schemas.base import ApiModel

PRICE_PATTERN = re.compile(r"^\d+(?:\.\d{1,2})?$")
STOCK_PATTERN = re.compile(r"^\d*$")


class _PhoneRules(ApiModel):
    @field_validator("price", check_fields=False)
    @classmethod
    def validate_price(cls, value: str | None) -> str | None:
        if value is not None and not PRICE_PATTERN.match(value):
            raise ValueError("The price must be a number with at most two decimals.")
        return value

    @field_validator("stock_quantity", check_fields=False)
    @classmethod
    def validate_stock_quantity(cls, value: str | None) -> str | None:
        if value is not None and not STOCK_PATTERN.match(value):
            raise ValueError("Stock quantity must be an integer.")
        return value


class PhoneCreate(_PhoneRules):
    model: str = Field(..., min_length=1, max_length=255)
    manufacturer: str = Field(..., min_length=1, max_length=255)
    processor: str = Field(..., min_length=1, max_length=255)
    ram: str = Field(..., min_length=1, max_length=255)
    storage_capacity: str = Field(..., min_length=1, max_length=255)
    camera_details: str = Field(..., min_length=1, max_length=255)
    battery_life: str = Field(..., min_length=1, max_length=255)
    screen_size: str = Field(..., min_length=1, max_length=255)
    price: str = Field(..., min_length=1, max_length=255)
    stock_quantity: Optional[str] = Field(None, max_length=255)


class PhoneUpdate(_PhoneRules):
    model: Optional[str] = Field(None, min_length=1, max_length=255)
    manufacturer: Optional[str] = Field(None, min_length=1, max_length=255)
    processor: Optional[str] = Field(None, min_length=1, max_length=255)
    ram: Optional[str] = Field(None, min_length=1, max_length=255)
    storage_capacity: Optional[str] = Field(None, min_length=1, max_length=255)
    camera_details: Optional[str] = Field(None, min_length=1, max_length=255)
    battery_life: Optional[str] = Field(None, min_length=1, max_length=255)
    screen_size: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[str] = Field(None, min_length=1, max_length=255)
    stock_quantity: Optional[str] = Field(None, max_length=255)
