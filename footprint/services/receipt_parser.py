"""
Receipt text parser: OCR'd receipt text -> food item guesses.

Heuristic only. Each non-empty line that is not a total/tax/footer line is
scanned for a `$d.dd` price and a quantity (`2 x`, `1.5 lb`, `3 ea`); what
remains is the item name, kept when it is 3..49 characters long and
keyword-categorized for the food calculator.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

_SKIP_WORDS = ("total", "subtotal", "tax", "change", "thank")

_PRICE = re.compile(r"\$?\d+\.\d{2}")
_QUANTITY = re.compile(r"(\d+(?:\.\d+)?)\s*(?:@|(?:each|ea|lb|oz|kg|g|x)(?![a-z]))", re.IGNORECASE)
_QUANTITY_UNIT = re.compile(r"(lb|oz|kg|g)$", re.IGNORECASE)

# Checked in order; first match wins.
_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("dairy", ("milk", "cheese", "yogurt", "butter", "cream")),
    ("meat", ("beef", "chicken", "pork", "turkey", "fish", "salmon", "tuna", "shrimp", "meat", "steak")),
    ("produce", ("apple", "banana", "orange", "tomato", "lettuce", "carrot", "onion", "potato",
                 "broccoli", "spinach", "fruit", "vegetable")),
    ("grains", ("bread", "rice", "pasta", "flour", "cereal", "oatmeal", "granola", "wheat")),
    ("processed", ("chips", "cookies", "candy", "soda", "juice", "snack", "frozen", "canned")),
)


@dataclass
class ReceiptItem:
    item: str
    price: Optional[Decimal] = None
    quantity: Optional[Decimal] = None
    unit: Optional[str] = None       # lb / oz / kg / g when the quantity is a weight
    category: str = "other"


def categorize_item(name: str) -> str:
    lower = name.lower()
    for category, words in _KEYWORDS:
        if any(word in lower for word in words):
            return category
    return "other"


def parse_receipt_text(text: str) -> list[ReceiptItem]:
    items: list[ReceiptItem] = []
    for line in (text or "").splitlines():
        line = line.strip()
        if not line:
            continue
        lower = line.lower()
        if any(word in lower for word in _SKIP_WORDS):
            continue

        name = line
        price = None
        price_match = _PRICE.search(line)
        if price_match:
            price = Decimal(price_match.group(0).lstrip("$"))
            name = name.replace(price_match.group(0), "", 1).strip()

        quantity = unit = None
        quantity_match = _QUANTITY.search(name)
        if quantity_match:
            quantity = Decimal(quantity_match.group(1))
            unit_match = _QUANTITY_UNIT.search(quantity_match.group(0))
            unit = unit_match.group(1).lower() if unit_match else None
            name = name.replace(quantity_match.group(0), "", 1).strip()

        name = re.sub(r"^\d+\s*", "", name)
        name = re.sub(r"\s+", " ", name).strip()
        if 2 < len(name) < 50:
            items.append(ReceiptItem(
                item=name,
                price=price,
                quantity=quantity,
                unit=unit,
                category=categorize_item(name),
            ))
    return items
