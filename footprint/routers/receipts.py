"""
Receipts router.

POST /receipts/parse   receipt text -> categorized food item guesses
"""
from __future__ import annotations

from fastapi import APIRouter

from footprint.schemas.receipt import ReceiptItemOut, ReceiptParseRequest, ReceiptParseResponse
from footprint.services.receipt_parser import parse_receipt_text

router = APIRouter(prefix="/receipts", tags=["receipts"])


@router.post(
    "/parse",
    response_model=ReceiptParseResponse,
    summary="Parse receipt text into food items",
)
def parse_receipt(body: ReceiptParseRequest):
    """
    Keyword heuristics only: lines mentioning totals, tax or change are
    skipped and each remaining line yields an item name, price, quantity
    and a food category guess. Review the result before recording it.
    """
    items = parse_receipt_text(body.text)
    return ReceiptParseResponse(
        count=len(items),
        items=[ReceiptItemOut.model_validate(i) for i in items],
    )
