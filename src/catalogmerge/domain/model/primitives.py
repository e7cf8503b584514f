"""Domain primitives: scalar aliases + small value objects.

Scalar aliases may be promoted to proper value objects later without changing imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

type Handle = str
type ImageURL = str
type ProductId = str
type VariantId = str
type ColorName = str

# color -> ordered image URLs, recomputed per request
type ColorImageMap = dict[ColorName, list[ImageURL]]


@dataclass(frozen=True, slots=True)
class Money:
    amount: Decimal
    currency_code: str = "USD"

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency_code}"
