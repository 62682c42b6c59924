# auth/dependencies.py
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from qrmenu.auth.security import decode_access_token
from qrmenu.core.config import Settings, get_settings
from qrmenu.crud import user as user_crud
from qrmenu.db import Database, get_db

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> dict:
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=401, detail="Access token required")

    user_id = decode_access_token(credentials.credentials, settings)
    if user_id is None:
        raise HTTPException(status_code=403, detail="Invalid or expired token")

    # Fresh row so deactivation takes effect immediately
    user = await user_crud.get_active_user(db, user_id)
    if not user:
        raise HTTPException(status_code=403, detail="User not found or inactive")
    return user


async def get_current_admin_user(user: dict = Depends(get_current_user)) -> dict:
    if user["role"] != "admin":
        raise HTTPException(status_code=403, detail="Admin access required")
    return user


def can_access_cafe(user: dict, cafe_id: int) -> bool:
    if user["role"] == "admin":
        return True
    return user.get("cafe_id") is not None and int(user["cafe_id"]) == int(cafe_id)


async def require_cafe_access(cafe_id: int, user: dict = Depends(get_current_user)) -> dict:
    """Route dependency for paths carrying ``{cafe_id}``: admins pass, owners only for their own café."""
    if not can_access_cafe(user, cafe_id):
        raise HTTPException(status_code=403, detail="Access denied to this cafe")
    return user
