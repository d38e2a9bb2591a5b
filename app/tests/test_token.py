import jwt
import pytest
from app.token import create_access_token, decode_access_token
from app.config import settings


def test_create_access_token_carries_principal():
    tok = create_access_token("5f0c7a8e-2d7b-4b7e-9d55-0d1f2b3c4d5e", "admin")
    decoded = jwt.decode(tok, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert decoded["sub"] == "5f0c7a8e-2d7b-4b7e-9d55-0d1f2b3c4d5e"
    assert decoded["role"] == "admin"
    assert decoded["exp"] > decoded["iat"]


def test_decode_rejects_foreign_signature():
    forged = jwt.encode({"sub": "x", "role": "admin"}, "not-the-key", algorithm=settings.ALGORITHM)
    with pytest.raises(jwt.InvalidSignatureError):
        decode_access_token(forged)
