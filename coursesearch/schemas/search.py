"""Search request parameters - validated input for the query builder."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class SortMode(str, Enum):
    UPCOMING = "upcoming"
    PRICE_ASC = "priceAsc"
    PRICE_DESC = "priceDesc"

    @classmethod
    def parse(cls, value: "str | SortMode | None") -> "SortMode":
        """Case-insensitive lookup; anything unrecognised sorts by upcoming session."""
        if isinstance(value, SortMode):
            return value
        if value:
            for mode in cls:
                if mode.value.lower() == value.strip().lower():
                    return mode
        return cls.UPCOMING


class SearchParams(BaseModel):
    q: str | None = None
    min_age: int | None = None
    max_age: int | None = None
    category: str | None = None
    type: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    start_date: datetime | None = None
    sort: SortMode = SortMode.UPCOMING
    page: int = Field(0, ge=0)
    size: int = Field(10, ge=1)

    @field_validator("q", "category", "type", mode="before")
    @classmethod
    def _blank_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("sort", mode="before")
    @classmethod
    def _parse_sort(cls, value):
        return SortMode.parse(value)
