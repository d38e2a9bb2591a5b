from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud
from ..auth import Principal, require_admin
from ..database import get_db
from ..schemas import CompanyCreate, CompanyOut, Page
from ..validators import PageParams, pagination_params, parse_uuid

router = APIRouter(prefix="/companies", tags=["companies"])


@router.get("", response_model=Page[CompanyOut])
def list_companies(params: PageParams = Depends(pagination_params), db: Session = Depends(get_db)):
    rows, total = crud.list_companies(db, params.page, params.size)
    return params.build(rows, total)


@router.get("/{company_id}", response_model=CompanyOut)
def get_company(company_id: str, db: Session = Depends(get_db)):
    company = crud.get_company(db, parse_uuid(company_id, "company"))
    if company is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Company not found")
    return company


@router.post("", response_model=CompanyOut, status_code=status.HTTP_201_CREATED)
def create_company(payload: CompanyCreate, db: Session = Depends(get_db), _: Principal = Depends(require_admin)):
    return crud.create_company(db, payload.name)
