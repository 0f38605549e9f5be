"""
Product request schemas.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from core.schemas import Name, RowId, Status


class ProductPayload(BaseModel):
    name: Name
    description: str = Field(..., min_length=10)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    # Declared after `price` so the validator below can compare against it.
    compare_price: Decimal | None = Field(default=None, max_digits=10, decimal_places=2)
    is_featured: Literal["Yes", "No"]
    status: Status
    category_id: RowId
    sub_category_id: RowId | None = None
    brand_id: RowId | None = None
    color_id: RowId | None = None

    @field_validator("compare_price")
    @classmethod
    def _compare_price_above_price(cls, value: Decimal | None, info: ValidationInfo) -> Decimal | None:
        price = info.data.get("price")
        if value is not None and price is not None and value <= price:
            raise ValueError("The compare price must be greater than the actual price.")
        return value
