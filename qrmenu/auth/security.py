# qrmenu/auth/security.py
from typing import Optional

import jwt
from fastapi_users.jwt import decode_jwt, generate_jwt
from fastapi_users.password import PasswordHelper

from qrmenu.core.config import Settings

password_helper = PasswordHelper()


def hash_password(password: str) -> str:
    return password_helper.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    verified, _ = password_helper.verify_and_update(plain_password, hashed_password)
    return verified


def create_access_token(user: dict, settings: Settings) -> str:
    data = {
        "sub": str(user["id"]),
        "email": user["email"],
        "role": user["role"],
        "aud": settings.jwt_audience,
    }
    return generate_jwt(data, settings.jwt_secret, settings.jwt_lifetime_seconds)


def decode_access_token(token: str, settings: Settings) -> Optional[int]:
    """Returns the user id carried by ``token``, or ``None`` when it is invalid or expired."""
    try:
        payload = decode_jwt(token, settings.jwt_secret, [settings.jwt_audience])
        return int(payload["sub"])
    except (jwt.PyJWTError, KeyError, TypeError, ValueError):
        return None
