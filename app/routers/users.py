import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from .. import crud, security
from ..auth import Principal, get_principal, require_admin, require_self_or_admin
from ..database import get_db
from ..results import raise_for
from ..schemas import JobOut, Message, Page, PasswordReset, UserCreate, UserMessage, UserOut, UserUpdate
from ..validators import PageParams, pagination_params, parse_uuid

router = APIRouter(prefix="/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def register_user(payload: UserCreate, db: Session = Depends(get_db)):
    if crud.get_user_by_email(db, payload.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")
    if crud.get_user_by_username(db, payload.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already taken")
    result = crud.create_user(db, **payload.model_dump())
    raise_for(result, "User not found")
    logger.info("User %s registered", result.value.id)
    return result.value


@router.get("", response_model=Page[UserOut])
def list_users(
    params: PageParams = Depends(pagination_params),
    db: Session = Depends(get_db),
    _: Principal = Depends(require_admin),
):
    rows, total = crud.list_users(db, params.page, params.size)
    return params.build(rows, total)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = crud.get_user(db, parse_uuid(user_id, "user"))
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    payload: UserUpdate,
    db: Session = Depends(get_db),
    principal: Principal | None = Depends(get_principal),
):
    uid = parse_uuid(user_id, "user")
    require_self_or_admin(uid, principal)
    result = crud.update_user(db, uid, payload.model_dump(exclude_unset=True))
    raise_for(result, "User not found")
    return result.value


@router.put("/{user_id}/password", response_model=Message)
def reset_password(
    user_id: str,
    payload: PasswordReset,
    db: Session = Depends(get_db),
    principal: Principal | None = Depends(get_principal),
):
    """Owners must prove the current password; admins may reset without it."""
    uid = parse_uuid(user_id, "user")
    caller = require_self_or_admin(uid, principal)
    if not caller.is_admin:
        stored = crud.get_password_hash(db, uid)
        if stored is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
        if not payload.current_password or not security.verify_password(payload.current_password, stored):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    result = crud.reset_password(db, uid, payload.new_password)
    raise_for(result, "User not found")
    logger.info("Password reset for user %s by %s", uid, caller.id)
    return {"message": "Password updated successfully"}


@router.delete("/{user_id}", response_model=UserMessage)
def delete_user(
    user_id: str,
    db: Session = Depends(get_db),
    principal: Principal | None = Depends(get_principal),
):
    uid = parse_uuid(user_id, "user")
    caller = require_self_or_admin(uid, principal)
    result = crud.delete_user(db, uid)
    raise_for(result, "User not found")
    logger.info("User %s deleted by %s", uid, caller.id)
    return {"message": "User deleted successfully", "user": result.value}


@router.get("/{user_id}/saved-jobs", response_model=list[JobOut])
def list_saved_jobs(
    user_id: str,
    db: Session = Depends(get_db),
    principal: Principal | None = Depends(get_principal),
):
    uid = parse_uuid(user_id, "user")
    require_self_or_admin(uid, principal)
    return crud.list_saved_jobs(db, uid)
