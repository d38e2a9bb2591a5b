from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from sqlalchemy.orm import Session

from . import crud, models, security
from .config import settings
from .token import decode_access_token

# The tokenUrl should point to the API login endpoint. auto_error is off so
# public routes can still see an optional principal.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated actor attached to a request."""
    id: uuid.UUID
    role: str

    def has_role(self, role: str) -> bool:
        return self.role.lower() == role.lower()

    @property
    def is_admin(self) -> bool:
        return self.has_role(settings.ADMIN_ROLE)


def authenticate_user(db: Session, login: str, password: str) -> models.User | None:
    """
    Authenticates a user by email or username and password.

    Returns the user object if authentication is successful, otherwise None.
    """
    user = crud.get_user_by_email(db, login) or crud.get_user_by_username(db, login)
    if not user or not security.verify_password(password, user.password):
        return None
    return user


def get_principal(token: str | None = Depends(oauth2_scheme)) -> Principal | None:
    """Decode the bearer token, if any. A bad or expired token counts as anonymous."""
    if not token:
        return None
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        return None
    sub = payload.get("sub")
    role = payload.get("role")
    if not sub or not isinstance(role, str):
        return None
    try:
        return Principal(id=uuid.UUID(str(sub)), role=role)
    except ValueError:
        return None


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def require_principal(principal: Principal | None = Depends(get_principal)) -> Principal:
    if principal is None:
        raise _unauthorized()
    return principal


def require_role(role: str) -> Callable[..., Principal]:
    """Dependency factory: the request must carry a principal with `role` (case-insensitive)."""

    def checker(principal: Principal | None = Depends(get_principal)) -> Principal:
        if principal is None or not principal.has_role(role):
            raise _unauthorized()
        return principal

    return checker


require_admin = require_role(settings.ADMIN_ROLE)


def require_self_or_admin(user_id: uuid.UUID, principal: Principal | None) -> Principal:
    """Account routes are open to the account owner and to admins."""
    if principal is None or (principal.id != user_id and not principal.is_admin):
        raise _unauthorized()
    return principal
