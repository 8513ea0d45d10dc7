"""
Winner report.

The report is a JSON array of {"productCode", "amount", "winner"} objects.
`amount` is written as a decimal string because 256-bit values do not fit
in a JSON number for most consumers.
"""

import json
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class WinningBid(BaseModel):
    """Highest bid on one live product."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_code: int = Field(alias="productCode", gt=0)
    amount: int = Field(ge=0)
    winner: str

    @field_serializer("amount")
    def serialize_amount(self, amount: int) -> str:
        return str(amount)


def serialize_winners(winners: List[WinningBid]) -> str:
    """Render winners as the JSON report."""
    return json.dumps([w.model_dump(by_alias=True) for w in winners])


def parse_winners(payload: str) -> List[WinningBid]:
    """Parse a JSON report back into models (amount strings are coerced)."""
    return [WinningBid.model_validate(item) for item in json.loads(payload)]
