import logging

from fastapi import APIRouter, Depends, HTTPException

from qrmenu.auth.dependencies import get_current_user
from qrmenu.auth.security import create_access_token, verify_password
from qrmenu.core.config import Settings, get_settings
from qrmenu.crud import activity as activity_crud
from qrmenu.crud import cafe as cafe_crud
from qrmenu.crud import user as user_crud
from qrmenu.db import Database, get_db
from qrmenu.schemas.auth import ChangePasswordRequest, LoginRequest

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login")
async def login(
    data: LoginRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not data.email or not data.password:
        raise HTTPException(status_code=400, detail="Email and password required")

    user = await user_crud.get_active_user_by_email(db, data.email)
    if not user or not verify_password(data.password, user["password"]):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(user, settings)
    await activity_crud.log_activity(db, user["id"], "login", "User logged in")
    log.info("🔐 %s logged in", user["email"])

    return {"token": token, "user": user_crud.public_user(user)}


@router.get("/me")
async def me(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    cafe = None
    if user.get("cafe_id"):
        cafe = await cafe_crud.get_cafe(db, user["cafe_id"])
    return {**user_crud.public_user(user), "cafe": cafe}


@router.post("/change-password")
async def change_password(
    data: ChangePasswordRequest,
    user: dict = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    if not verify_password(data.currentPassword, user["password"]):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    if len(data.newPassword) < 6:
        raise HTTPException(status_code=400, detail="New password must be at least 6 characters")

    await user_crud.set_password(db, user["id"], data.newPassword)
    await activity_crud.log_activity(db, user["id"], "password_change", "Password changed")
    return {"message": "Password updated successfully"}
