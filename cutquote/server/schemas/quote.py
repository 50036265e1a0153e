# cutquote/server/schemas/quote.py
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LineItemIn(BaseModel):
    """
    One row from the quote form.

    Numeric fields are kept as sent (number, numeric string, garbage or
    null). They are coerced with parse_lenient_number at pricing time, so
    the request itself is never rejected for bad numbers.

    thickness is carried along but not part of the price formula. It only
    feeds the estimate preview (see services.pricing.estimate_quote).
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    path_length_area: Any = Field(default=0, alias="pathLengthArea")
    thickness: Any = None
    passes: Any = 0
    quantity: Any = 0


class QuoteRequest(BaseModel):
    """
    Payload for /api/generate-quote.

    description is shared by every row in the rendered table.
    rate applies to all items.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    customer_name: str = Field(default="", alias="customerName")
    description: str = ""
    rate: Any = 0
    factor: Any = None
    items: List[LineItemIn] = Field(default_factory=list)

    @field_validator("customer_name", "description", mode="before")
    @classmethod
    def _text_or_empty(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("items", mode="before")
    @classmethod
    def _items_or_empty(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            # 5, "abc", null: keep the row, priced as zero
            return [it if isinstance(it, (dict, LineItemIn)) else {} for it in v]
        return v


class PricedLineOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    index: int
    description: str
    quantity: float
    unit_total: float = Field(alias="unitTotal")
    item_total: float = Field(alias="itemTotal")


class EstimateOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    factor: float
    total_units: float = Field(alias="totalUnits")
    estimated_cost: float = Field(alias="estimatedCost")


class QuotePreviewOut(BaseModel):
    """
    Response body of /api/quote-preview.

    items and finalTotal are the authoritative numbers (same as the PDF).
    estimate is the thickness/factor preview and is informational only.
    """

    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(alias="customerName")
    items: List[PricedLineOut]
    final_total: float = Field(alias="finalTotal")
    estimate: Optional[EstimateOut] = None
