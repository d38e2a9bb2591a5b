# app/token.py
from datetime import datetime, timedelta, timezone
import jwt
from .config import settings

def create_access_token(subject: str, role: str) -> str:
    """Sign a bearer token carrying the principal: user id in `sub`, plus `role`."""
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    payload = {"sub": subject, "role": role, "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def decode_access_token(token: str) -> dict:
    return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
