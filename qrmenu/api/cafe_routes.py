import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from qrmenu.auth.dependencies import get_current_admin_user, get_current_user, require_cafe_access
from qrmenu.core.config import Settings, get_settings
from qrmenu.core.exceptions import InvalidUpload
from qrmenu.crud import activity as activity_crud
from qrmenu.crud import cafe as cafe_crud
from qrmenu.crud import category as category_crud
from qrmenu.crud import user as user_crud
from qrmenu.db import Database, get_db
from qrmenu.schemas.cafe import CafeFromGoogle, ExtractMenuRequest, PublishRequest
from qrmenu.services.deploy import public_menu_url
from qrmenu.services.profile_extractor import extract_profile
from qrmenu.services.qr import generate_qr_code
from qrmenu.services.sample_menu import sample_menu
from qrmenu.utils.uploads import save_image

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cafe", tags=["cafe"])

# Multipart field -> cafes column
_FORM_COLUMNS = {
    "primaryColor": "primary_color",
    "secondaryColor": "secondary_color",
    "accentColor": "accent_color",
    "backgroundColor": "background_color",
    "textColor": "text_color",
}


def _parse_flag(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ("1", "true", "yes", "on"):
        return 1
    if lowered in ("0", "false", "no", "off"):
        return 0
    return None


async def _get_cafe_or_404(db: Database, cafe_id: int) -> dict:
    cafe = await cafe_crud.get_cafe(db, cafe_id)
    if not cafe:
        raise HTTPException(status_code=404, detail="Cafe not found")
    return cafe


async def _store_logo(logo: Optional[UploadFile], settings: Settings) -> Optional[str]:
    try:
        return await save_image(logo, settings.upload_root, "logos")
    except InvalidUpload as e:
        raise HTTPException(status_code=400, detail=str(e))


# ----- Listing
@router.get("")
async def list_cafes(user: dict = Depends(get_current_user), db: Database = Depends(get_db)):
    return await cafe_crud.get_cafes_for_user(db, user)


@router.get("/{cafe_id}")
async def get_cafe(cafe_id: int, user: dict = Depends(require_cafe_access), db: Database = Depends(get_db)):
    return await _get_cafe_or_404(db, cafe_id)


# ----- Creation
@router.post("/manual")
async def create_cafe_manual(
    name: str = Form(...),
    tagline: str = Form(""),
    description: str = Form(""),
    phone: str = Form(""),
    email: str = Form(""),
    address: str = Form(""),
    currency: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    admin: dict = Depends(get_current_admin_user),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not name.strip():
        raise HTTPException(status_code=400, detail="Cafe name required")

    logo_path = await _store_logo(logo, settings)
    cafe = await cafe_crud.create_cafe(db, {
        "name": name.strip(),
        "tagline": tagline,
        "description": description,
        "phone": phone,
        "email": email,
        "address": address,
        "currency": currency or None,
        "logo": logo_path,
    }, created_by=admin["id"])

    await activity_crud.log_activity(db, admin["id"], "create_cafe", f"Created cafe manually: {cafe['name']}", cafe["id"])
    return {"success": True, "cafe": cafe}


@router.post("/from-google")
async def create_cafe_from_google(
    data: CafeFromGoogle,
    admin: dict = Depends(get_current_admin_user),
    db: Database = Depends(get_db),
):
    url = data.url
    if not url:
        raise HTTPException(status_code=400, detail="Google link required")

    # A failed extraction still yields a usable stub profile
    result = await extract_profile(url)
    profile = result.profile

    fields = {**profile.to_cafe_fields(), "google_link": url}
    cafe = await cafe_crud.create_cafe(db, fields, created_by=admin["id"])
    if profile.categories:
        await category_crud.import_categories(db, cafe["id"], profile.categories)
    if data.ownerId is not None:
        await user_crud.update_owner(db, data.ownerId, {"cafe_id": cafe["id"]})

    await activity_crud.log_activity(db, admin["id"], "create_cafe", f"Created cafe from Google: {cafe['name']}", cafe["id"])
    return {
        "success": True,
        "extracted": result.success,
        "error": result.error,
        "cafe": {**profile.as_dict(), **cafe},
    }


# ----- Menu seeding
@router.post("/{cafe_id}/extract-menu")
async def extract_menu(
    cafe_id: int,
    data: ExtractMenuRequest,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    await _get_cafe_or_404(db, cafe_id)

    result = await extract_profile(data.googleUrl)
    categories_added, items_added = await category_crud.import_categories(db, cafe_id, result.profile.categories)
    await cafe_crud.update_cafe(db, cafe_id, {"google_link": data.googleUrl})

    await activity_crud.log_activity(db, user["id"], "extract_menu", f"Extracted {items_added} items from Google", cafe_id)
    return {
        "success": True,
        "categoriesAdded": categories_added,
        "itemsAdded": items_added,
        "message": f"Successfully extracted {categories_added} categories with {items_added} items",
    }


@router.post("/{cafe_id}/sample-menu")
async def add_sample_menu(
    cafe_id: int,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    await _get_cafe_or_404(db, cafe_id)

    categories_added, items_added = await category_crud.import_categories(db, cafe_id, sample_menu())
    log.info("Added sample menu to cafe %s: %d categories, %d items", cafe_id, categories_added, items_added)

    await activity_crud.log_activity(db, user["id"], "add_sample_menu", f"Added sample menu with {items_added} items", cafe_id)
    return {
        "success": True,
        "categoriesAdded": categories_added,
        "itemsAdded": items_added,
        "message": f"Successfully added {categories_added} categories with {items_added} items",
    }


# ----- Update
@router.put("/{cafe_id}")
async def update_cafe(
    cafe_id: int,
    name: Optional[str] = Form(None),
    tagline: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    email: Optional[str] = Form(None),
    address: Optional[str] = Form(None),
    website: Optional[str] = Form(None),
    instagram: Optional[str] = Form(None),
    facebook: Optional[str] = Form(None),
    currency: Optional[str] = Form(None),
    is_published: Optional[str] = Form(None),
    primaryColor: Optional[str] = Form(None),
    secondaryColor: Optional[str] = Form(None),
    accentColor: Optional[str] = Form(None),
    backgroundColor: Optional[str] = Form(None),
    textColor: Optional[str] = Form(None),
    logo: Optional[UploadFile] = File(None),
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    await _get_cafe_or_404(db, cafe_id)

    # Blank form values arrive as None and leave the stored value alone
    updates = {
        "tagline": tagline,
        "description": description,
        "phone": phone,
        "email": email,
        "address": address,
        "website": website,
        "instagram": instagram,
        "facebook": facebook,
        "name": name or None,
        "currency": currency or None,
        "is_published": _parse_flag(is_published),
    }
    colors = {"primaryColor": primaryColor, "secondaryColor": secondaryColor, "accentColor": accentColor,
              "backgroundColor": backgroundColor, "textColor": textColor}
    for field_name, value in colors.items():
        updates[_FORM_COLUMNS[field_name]] = value or None

    logo_path = await _store_logo(logo, settings)
    if logo_path:
        updates["logo"] = logo_path

    await cafe_crud.update_cafe(db, cafe_id, {k: v for k, v in updates.items() if v is not None})
    await activity_crud.log_activity(db, user["id"], "update_cafe", "Updated cafe details", cafe_id)
    return {"success": True, "message": "Cafe updated"}


@router.post("/{cafe_id}/publish")
async def publish_cafe(
    cafe_id: int,
    data: PublishRequest,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    await _get_cafe_or_404(db, cafe_id)
    await cafe_crud.set_published(db, cafe_id, data.publish)
    return {"success": True, "isPublished": data.publish}


@router.post("/{cafe_id}/generate-qr")
async def generate_qr(
    cafe_id: int,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    cafe = await _get_cafe_or_404(db, cafe_id)
    menu_url = cafe.get("deployed_url") or public_menu_url(settings.base_url, cafe["slug"])

    try:
        qr_path = generate_qr_code(
            menu_url, cafe["slug"], settings.upload_root,
            serverless=settings.is_serverless, dark_color=cafe.get("primary_color"),
        )
    except (OSError, ValueError):
        log.exception("QR generation failed for cafe %s", cafe_id)
        raise HTTPException(status_code=500, detail="Failed to generate QR code")

    await cafe_crud.set_qr_code_path(db, cafe_id, qr_path)
    return {"success": True, "qrCode": qr_path, "menuUrl": menu_url}


# ----- Delete
@router.delete("/{cafe_id}")
async def delete_cafe(
    cafe_id: int,
    admin: dict = Depends(get_current_admin_user),
    db: Database = Depends(get_db),
):
    cafe = await _get_cafe_or_404(db, cafe_id)
    await cafe_crud.delete_cafe(db, cafe_id)
    await activity_crud.log_activity(db, admin["id"], "delete_cafe", f"Deleted cafe: {cafe['name']}")
    return {"success": True, "message": "Cafe deleted"}
