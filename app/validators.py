"""
Query-string validators shared by the list endpoints, plus path-id parsing.

Malformed query values are rejected by FastAPI with 422; malformed path ids
are rejected here with 400.
"""
from __future__ import annotations

import math
import uuid
from dataclasses import dataclass
from typing import Any, Sequence

from fastapi import HTTPException, Query, status

from .config import settings
from .schemas import DB_INT_MAX


@dataclass(frozen=True)
class PageParams:
    page: int
    size: int

    def build(self, items: Sequence[Any], total: int) -> dict[str, Any]:
        return {
            "data": list(items),
            "pagination": {
                "current_page": self.page,
                "page_size": self.size,
                "total_count": total,
                "total_pages": math.ceil(total / self.size),
            },
        }


def pagination_params(
    page_index: int = Query(1, alias="pageIndex", ge=1, le=DB_INT_MAX),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, alias="pageSize", ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    return PageParams(page=page_index, size=page_size)


@dataclass(frozen=True)
class JobFilters:
    category_id: int | None = None
    level_id: int | None = None
    company_name: str | None = None
    title: str | None = None


def job_filter_params(
    category_id: int | None = Query(None, alias="categoryId", ge=1, le=DB_INT_MAX),
    level_id: int | None = Query(None, alias="levelId", ge=1, le=DB_INT_MAX),
    company_name: str | None = Query(None, alias="companyName", max_length=512),
    title: str | None = Query(None, max_length=512),
) -> JobFilters:
    return JobFilters(category_id=category_id, level_id=level_id, company_name=company_name, title=title)


@dataclass(frozen=True)
class EventFilters:
    type_id: int | None = None
    title: str | None = None


def event_filter_params(
    type_id: int | None = Query(None, alias="typeId", ge=1, le=DB_INT_MAX),
    title: str | None = Query(None, max_length=512),
) -> EventFilters:
    return EventFilters(type_id=type_id, title=title)


def parse_uuid(value: str, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {label} ID format")


def parse_int_id(value: str, label: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        parsed = 0
    if not 1 <= parsed <= DB_INT_MAX:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid {label} ID format")
    return parsed
