"""
Job categories and job levels.

Both are (id, title) lookup tables with a unique title and admin-only
mutations, so one router factory serves both.
"""
import logging
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import crud
from ..auth import Principal, require_admin
from ..database import get_db
from ..results import raise_for
from ..schemas import CategoryMessage, CategoryOut, LevelMessage, LevelOut, Page, TitleIn, TitleOut
from ..validators import PageParams, pagination_params, parse_int_id

logger = logging.getLogger(__name__)


def build_router(
    prefix: str,
    label: str,
    key: str,
    out_model: type[BaseModel],
    message_model: type[BaseModel],
    get: Callable,
    list_: Callable,
    create: Callable,
    update: Callable,
    delete: Callable,
) -> APIRouter:
    """`label` is the human name ("Job category"), `key` the response field ("category")."""
    router = APIRouter(prefix=prefix, tags=[prefix.strip("/")])
    not_found = f"{label} not found"

    @router.get("", response_model=Page[TitleOut])
    def list_rows(params: PageParams = Depends(pagination_params), db: Session = Depends(get_db)):
        rows, total = list_(db, params.page, params.size)
        return params.build(rows, total)

    @router.get("/{row_id}", response_model=out_model)
    def get_row(row_id: str, db: Session = Depends(get_db)):
        row = get(db, parse_int_id(row_id, key))
        if row is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=not_found)
        return {key: row}

    @router.post("", response_model=message_model, status_code=status.HTTP_201_CREATED)
    def create_row(payload: TitleIn, db: Session = Depends(get_db), principal: Principal = Depends(require_admin)):
        result = create(db, payload.title)
        raise_for(result, not_found)
        logger.info("%s %r created by admin %s", label, payload.title, principal.id)
        return {"message": f"{label} created successfully", key: result.value}

    @router.put("/{row_id}", response_model=message_model)
    def update_row(
        row_id: str,
        payload: TitleIn,
        db: Session = Depends(get_db),
        _: Principal = Depends(require_admin),
    ):
        result = update(db, parse_int_id(row_id, key), payload.title)
        raise_for(result, not_found)
        return {"message": f"{label} updated successfully", key: result.value}

    @router.delete("/{row_id}", response_model=message_model)
    def delete_row(row_id: str, db: Session = Depends(get_db), principal: Principal = Depends(require_admin)):
        result = delete(db, parse_int_id(row_id, key))
        raise_for(result, not_found)
        logger.info("%s %s deleted by admin %s", label, row_id, principal.id)
        return {"message": f"{label} deleted successfully", key: result.value}

    return router


categories_router = build_router(
    "/job-categories",
    "Job category",
    "category",
    CategoryOut,
    CategoryMessage,
    get=crud.get_category,
    list_=crud.list_categories,
    create=crud.create_category,
    update=crud.update_category,
    delete=crud.delete_category,
)

levels_router = build_router(
    "/job-levels",
    "Job level",
    "level",
    LevelOut,
    LevelMessage,
    get=crud.get_level,
    list_=crud.list_levels,
    create=crud.create_level,
    update=crud.update_level,
    delete=crud.delete_level,
)
