import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from qrmenu.auth.dependencies import require_cafe_access
from qrmenu.core.config import Settings, get_settings
from qrmenu.core.exceptions import InvalidUpload
from qrmenu.crud import activity as activity_crud
from qrmenu.crud import category as category_crud
from qrmenu.crud import menu as menu_crud
from qrmenu.crud import menu_item as item_crud
from qrmenu.db import Database, get_db
from qrmenu.schemas.menu import (
    BulkItemsRequest,
    CategoryCreate,
    CategoryUpdate,
    ItemCreate,
    ItemUpdate,
    ReorderRequest,
)
from qrmenu.utils.uploads import save_image

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/menu", tags=["menu"])


async def _category_or_404(db: Database, cafe_id: int, category_id: int) -> dict:
    category = await category_crud.get_category(db, cafe_id, category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return category


async def _store_item_image(image: Optional[UploadFile], settings: Settings) -> Optional[str]:
    try:
        return await save_image(image, settings.upload_root, "items")
    except InvalidUpload as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{cafe_id}/full")
async def get_full_menu(cafe_id: int, user: dict = Depends(require_cafe_access), db: Database = Depends(get_db)):
    return await menu_crud.get_full_menu(db, cafe_id)


# ---------- Categories ----------

@router.get("/{cafe_id}/categories")
async def list_categories(cafe_id: int, user: dict = Depends(require_cafe_access), db: Database = Depends(get_db)):
    return await category_crud.get_categories(db, cafe_id)


@router.post("/{cafe_id}/categories")
async def create_category(
    cafe_id: int,
    data: CategoryCreate,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    category_id = await category_crud.create_category(
        db, cafe_id, data.name.strip(), data.icon, data.description, data.sort_order,
    )
    await activity_crud.log_activity(db, user["id"], "add_category", f"Added category: {data.name}", cafe_id)
    return {"success": True, "category": {"id": category_id, "name": data.name}}


@router.put("/{cafe_id}/categories/{category_id}")
async def update_category(
    cafe_id: int,
    category_id: int,
    data: CategoryUpdate,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    await _category_or_404(db, cafe_id, category_id)
    updates = data.model_dump(exclude_unset=True, exclude_none=True)
    if "is_active" in updates:
        updates["is_active"] = 1 if updates["is_active"] else 0
    await category_crud.update_category(db, cafe_id, category_id, updates)
    return {"success": True, "message": "Category updated"}


@router.post("/{cafe_id}/categories/reorder")
async def reorder_categories(
    cafe_id: int,
    data: ReorderRequest,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    await category_crud.reorder_categories(db, cafe_id, data.order)
    return {"success": True}


@router.delete("/{cafe_id}/categories/{category_id}")
async def delete_category(
    cafe_id: int,
    category_id: int,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    category = await _category_or_404(db, cafe_id, category_id)
    await category_crud.delete_category(db, cafe_id, category_id)
    await activity_crud.log_activity(db, user["id"], "delete_category", f"Deleted category: {category['name']}", cafe_id)
    return {"success": True, "message": "Category deleted"}


# ---------- Items ----------

@router.get("/{cafe_id}/items")
async def list_items(cafe_id: int, user: dict = Depends(require_cafe_access), db: Database = Depends(get_db)):
    return await item_crud.get_items(db, cafe_id)


@router.get("/{cafe_id}/categories/{category_id}/items")
async def list_category_items(
    cafe_id: int,
    category_id: int,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    return await item_crud.get_category_items(db, cafe_id, category_id)


@router.get("/{cafe_id}/items/{item_id}")
async def get_item(cafe_id: int, item_id: int, user: dict = Depends(require_cafe_access),
                   db: Database = Depends(get_db)):
    item = await item_crud.get_item(db, cafe_id, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


@router.post("/{cafe_id}/categories/{category_id}/items")
async def create_category_item(
    cafe_id: int,
    category_id: int,
    data: ItemCreate,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    await _category_or_404(db, cafe_id, category_id)
    item_id = await item_crud.create_item(db, cafe_id, {**data.model_dump(), "category_id": category_id})
    await activity_crud.log_activity(db, user["id"], "add_item", f"Added item: {data.name}", cafe_id)
    return {"success": True, "item": {"id": item_id, "name": data.name}}


@router.post("/{cafe_id}/items")
async def create_item(
    cafe_id: int,
    categoryId: int = Form(...),
    name: str = Form(...),
    description: str = Form(""),
    price: Optional[float] = Form(None),
    originalPrice: Optional[float] = Form(None),
    calories: Optional[int] = Form(None),
    isVegan: bool = Form(False),
    isVegetarian: bool = Form(False),
    isGlutenFree: bool = Form(False),
    isSpicy: bool = Form(False),
    isBestseller: bool = Form(False),
    isNew: bool = Form(False),
    image: Optional[UploadFile] = File(None),
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Multipart variant of item creation that accepts an optional photo."""
    if not name.strip():
        raise HTTPException(status_code=400, detail="Name and category required")
    await _category_or_404(db, cafe_id, categoryId)

    image_path = await _store_item_image(image, settings)
    item_id = await item_crud.create_item(db, cafe_id, {
        "category_id": categoryId,
        "name": name.strip(),
        "description": description,
        "price": price,
        "original_price": originalPrice,
        "calories": calories,
        "image": image_path,
        "is_vegan": isVegan,
        "is_vegetarian": isVegetarian,
        "is_gluten_free": isGlutenFree,
        "is_spicy": isSpicy,
        "is_bestseller": isBestseller,
        "is_new": isNew,
    })
    await activity_crud.log_activity(db, user["id"], "add_item", f"Added item: {name}", cafe_id)
    return {"success": True, "item": {"id": item_id, "name": name}}


@router.put("/{cafe_id}/items/{item_id}")
async def update_item(
    cafe_id: int,
    item_id: int,
    data: ItemUpdate,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    if not await item_crud.get_item(db, cafe_id, item_id):
        raise HTTPException(status_code=404, detail="Item not found")

    updates = data.model_dump(exclude_unset=True)
    if updates.get("category_id") is not None:
        await _category_or_404(db, cafe_id, updates["category_id"])
    # Nullable columns may be cleared; the rest keep their value when sent as null
    clearable = {"original_price", "calories", "image", "description"}
    updates = {k: v for k, v in updates.items() if v is not None or k in clearable}

    await item_crud.update_item(db, cafe_id, item_id, updates)
    return {"success": True, "message": "Item updated"}


@router.post("/{cafe_id}/items/{item_id}/image")
async def upload_item_image(
    cafe_id: int,
    item_id: int,
    image: UploadFile = File(...),
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    if not await item_crud.get_item(db, cafe_id, item_id):
        raise HTTPException(status_code=404, detail="Item not found")
    image_path = await _store_item_image(image, settings)
    await item_crud.update_item(db, cafe_id, item_id, {"image": image_path})
    return {"success": True, "image": image_path}


@router.patch("/{cafe_id}/items/{item_id}/toggle")
async def toggle_item(
    cafe_id: int,
    item_id: int,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    available = await item_crud.toggle_availability(db, cafe_id, item_id)
    if available is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return {"success": True, "isAvailable": available}


@router.post("/{cafe_id}/items/reorder")
async def reorder_items(
    cafe_id: int,
    data: ReorderRequest,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    await item_crud.reorder_items(db, cafe_id, data.order)
    return {"success": True}


@router.delete("/{cafe_id}/items/{item_id}")
async def delete_item(
    cafe_id: int,
    item_id: int,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    item = await item_crud.get_item(db, cafe_id, item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Item not found")
    await item_crud.delete_item(db, cafe_id, item_id)
    await activity_crud.log_activity(db, user["id"], "delete_item", f"Deleted item: {item['name']}", cafe_id)
    return {"success": True, "message": "Item deleted"}


@router.post("/{cafe_id}/items/bulk")
async def bulk_add_items(
    cafe_id: int,
    data: BulkItemsRequest,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
):
    await _category_or_404(db, cafe_id, data.categoryId)
    created = await item_crud.bulk_create_items(
        db, cafe_id, data.categoryId, [item.model_dump(exclude={"sort_order"}) for item in data.items],
    )
    await activity_crud.log_activity(db, user["id"], "bulk_add_items", f"Added {created} items", cafe_id)
    return {"success": True, "created": created}
