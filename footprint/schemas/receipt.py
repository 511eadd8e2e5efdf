"""
Receipt text parsing schemas.  POST /receipts/parse
"""
from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReceiptParseRequest(BaseModel):
    text: str = Field(
        ...,
        min_length=1,
        max_length=20_000,
        description="Raw receipt text (e.g. OCR output), one item per line.",
        examples=["2 x Whole Milk $3.49\nChicken breast 1.5 lb $7.12\nTOTAL $10.61"],
    )


class ReceiptItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    item: str
    price: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None
    category: str


class ReceiptParseResponse(BaseModel):
    count: int
    items: list[ReceiptItemOut]
