"""
Outcome types returned by data-access writes.

Business-rule failures are values, not exceptions: callers branch on the
result type and map it to a status code. Unexpected database errors still
raise.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from fastapi import HTTPException, status

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True, slots=True)
class NotFound:
    entity: str


@dataclass(frozen=True, slots=True)
class Conflict:
    detail: str


@dataclass(frozen=True, slots=True)
class Invalid:
    """A referenced row (category, level, company, user, event) does not exist."""
    detail: str


Result = Union[Ok[T], NotFound, Conflict, Invalid]


def raise_for(result: object, not_found: str) -> None:
    """Turn a failed outcome into the matching HTTP error; `Ok` passes through."""
    if isinstance(result, NotFound):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
    if isinstance(result, Conflict):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.detail)
    if isinstance(result, Invalid):
        raise HTTPException(status_code=422, detail=result.detail)
