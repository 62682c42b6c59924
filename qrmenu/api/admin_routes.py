import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException

from qrmenu.auth.dependencies import get_current_admin_user
from qrmenu.crud import activity as activity_crud
from qrmenu.crud import cafe as cafe_crud
from qrmenu.crud import user as user_crud
from qrmenu.db import Database, get_db
from qrmenu.schemas.owner import OwnerCreate, OwnerUpdate

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])


# ----- Dashboard
@router.get("/stats")
async def get_stats(db: Database = Depends(get_db), admin: dict = Depends(get_current_admin_user)):
    stats = await cafe_crud.get_stats(db)
    recent = await cafe_crud.recent_cafes(db)
    return {**stats, "recentCafes": recent}


@router.get("/cafes")
async def list_cafes(db: Database = Depends(get_db), admin: dict = Depends(get_current_admin_user)):
    return await cafe_crud.get_cafes_with_counts(db)


@router.get("/activity")
async def list_activity(limit: int = 10, db: Database = Depends(get_db),
                        admin: dict = Depends(get_current_admin_user)):
    return await activity_crud.recent_activity(db, max(1, min(limit, 100)))


# ----- Owners
@router.get("/owners")
async def list_owners(db: Database = Depends(get_db), admin: dict = Depends(get_current_admin_user)):
    return await user_crud.list_owners(db)


@router.post("/owners", status_code=201)
async def create_owner(
    data: OwnerCreate,
    db: Database = Depends(get_db),
    admin: dict = Depends(get_current_admin_user),
):
    if await user_crud.email_exists(db, data.email):
        raise HTTPException(status_code=400, detail="Email already exists")
    if data.cafeId is not None and not await cafe_crud.get_cafe(db, data.cafeId):
        raise HTTPException(status_code=404, detail="Cafe not found")

    # No password given: hand back a generated one exactly once
    password = data.password or secrets.token_urlsafe(9)
    owner_id = await user_crud.create_user(
        db, email=data.email, password=password, name=data.name, role="owner", cafe_id=data.cafeId,
    )
    await activity_crud.log_activity(db, admin["id"], "owner_create", f"Created owner: {data.email}", data.cafeId)

    return {
        "id": owner_id,
        "email": data.email,
        "name": data.name,
        "cafeId": data.cafeId,
        "tempPassword": None if data.password else password,
    }


@router.put("/owners/{owner_id}")
async def update_owner(
    owner_id: int,
    data: OwnerUpdate,
    db: Database = Depends(get_db),
    admin: dict = Depends(get_current_admin_user),
):
    owner = await user_crud.get_user(db, owner_id)
    if not owner or owner["role"] != "owner":
        raise HTTPException(status_code=404, detail="Owner not found")
    if data.email and await user_crud.email_exists(db, data.email, exclude_id=owner_id):
        raise HTTPException(status_code=400, detail="Email already exists")

    await user_crud.update_owner(db, owner_id, data.to_columns())
    await activity_crud.log_activity(db, admin["id"], "owner_update", f"Updated owner: {owner['email']}")
    return {"message": "Owner updated successfully"}


@router.delete("/owners/{owner_id}")
async def delete_owner(
    owner_id: int,
    db: Database = Depends(get_db),
    admin: dict = Depends(get_current_admin_user),
):
    owner = await user_crud.get_user(db, owner_id)
    if not owner or owner["role"] != "owner":
        raise HTTPException(status_code=404, detail="Owner not found")

    await user_crud.delete_owner(db, owner_id)
    await activity_crud.log_activity(db, admin["id"], "owner_delete", f"Deleted owner: {owner['email']}")
    return {"message": "Owner deleted successfully"}
