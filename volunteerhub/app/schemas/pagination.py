"""
Pagination schemas.
PaginatedResponse wraps notification and user listings; the activity listing
uses the {data, pagination} envelope its clients expect.
"""
from __future__ import annotations

import math
from typing import Generic, TypeVar

from pydantic import BaseModel, computed_field

T = TypeVar("T")


def total_pages(total: int, page_size: int) -> int:
    """Number of pages for `total` rows; an empty result still has one page."""
    if page_size <= 0:
        return 1
    return max(1, math.ceil(total / page_size))


class PaginatedResponse(BaseModel, Generic[T]):
    items: list[T]
    total: int
    page: int
    size: int

    @computed_field  # type: ignore[misc]
    @property
    def pages(self) -> int:
        return total_pages(self.total, self.size)

    model_config = {"from_attributes": True}


class Pagination(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class DataPage(BaseModel, Generic[T]):
    data: list[T]
    pagination: Pagination
