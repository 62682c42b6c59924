import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse

from qrmenu.core.config import Settings, get_settings
from qrmenu.crud import cafe as cafe_crud
from qrmenu.crud import menu as menu_crud
from qrmenu.db import Database, get_db
from qrmenu.services.menu_renderer import MenuRenderError, render

log = logging.getLogger(__name__)

router = APIRouter(tags=["public"])

# Fields exposed on the public JSON menu
_PUBLIC_ITEM_FIELDS = (
    "id", "category_id", "name", "description", "price", "original_price", "image", "calories",
    "is_vegan", "is_vegetarian", "is_gluten_free", "is_spicy", "is_bestseller", "is_new",
)
_PUBLIC_CATEGORY_FIELDS = ("id", "name", "icon", "description")


async def _visible_cafe(db: Database, slug: str, preview: bool) -> dict:
    """A published café, or any café in preview mode. Drafts are indistinguishable from missing slugs."""
    cafe = await cafe_crud.get_public_cafe(db, slug)
    if not cafe or (not cafe["is_published"] and not preview):
        raise HTTPException(status_code=404, detail="Menu not found")
    return cafe


def _public_category(category: dict) -> dict:
    return {
        **{key: category.get(key) for key in _PUBLIC_CATEGORY_FIELDS},
        "items": [{key: item.get(key) for key in _PUBLIC_ITEM_FIELDS} for item in category["items"]],
    }


@router.get("/api/public/menu/{slug}")
async def public_menu(slug: str, preview: bool = False, db: Database = Depends(get_db)):
    cafe = await _visible_cafe(db, slug, preview)
    menu = await menu_crud.get_display_menu(db, cafe["id"])

    return {
        "cafe": {
            "name": cafe["name"],
            "tagline": cafe["tagline"],
            "description": cafe["description"],
            "logo": cafe["logo"],
            "coverImage": cafe["cover_image"],
            "contact": {
                "phone": cafe["phone"],
                "email": cafe["email"],
                "address": cafe["address"],
                "website": cafe["website"],
            },
            "social": {"instagram": cafe["instagram"], "facebook": cafe["facebook"]},
            "currency": cafe["currency"],
            "theme": {
                "primaryColor": cafe["primary_color"],
                "secondaryColor": cafe["secondary_color"],
                "accentColor": cafe["accent_color"],
                "backgroundColor": cafe["background_color"],
                "textColor": cafe["text_color"],
            },
        },
        "categories": [_public_category(category) for category in menu],
    }


@router.get("/api/public/check-slug/{slug}")
async def check_slug(slug: str, db: Database = Depends(get_db)):
    return {"available": not await cafe_crud.slug_exists(db, slug)}


@router.get("/m/{slug}", response_class=HTMLResponse)
async def menu_page(slug: str, preview: bool = False, db: Database = Depends(get_db)):
    """The rendered menu page, built on every request from current data."""
    cafe = await _visible_cafe(db, slug, preview)
    menu = await menu_crud.get_display_menu(db, cafe["id"])
    try:
        html = render(cafe, menu)
    except MenuRenderError:
        log.exception("Could not render menu for '%s'", slug)
        raise HTTPException(status_code=500, detail="Failed to render menu")
    return HTMLResponse(content=html)


@router.get("/api/health")
async def health(request: Request, settings: Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "dbReady": getattr(request.app.state, "db", None) is not None,
        "deployMode": settings.resolved_deploy_mode,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
