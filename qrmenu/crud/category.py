from typing import Optional, Sequence

from qrmenu.core.constants import DEFAULT_CATEGORY_ICON
from qrmenu.db import Database
from qrmenu.services.sample_menu import category_icon

CATEGORY_COLUMNS = ("name", "icon", "description", "sort_order", "is_active")


async def get_categories(db: Database, cafe_id: int, active_only: bool = False):
    """Categories for a café in display order (sort_order, then creation order)"""
    if active_only:
        return await db.all(
            "SELECT * FROM categories WHERE cafe_id = ? AND is_active = 1 ORDER BY sort_order ASC, id ASC",
            cafe_id,
        )
    return await db.all(
        "SELECT * FROM categories WHERE cafe_id = ? ORDER BY sort_order ASC, id ASC",
        cafe_id,
    )


async def get_category(db: Database, cafe_id: int, category_id: int) -> Optional[dict]:
    return await db.get(
        "SELECT * FROM categories WHERE id = ? AND cafe_id = ?", category_id, cafe_id
    )


async def next_sort_order(db: Database, cafe_id: int) -> int:
    row = await db.get("SELECT MAX(sort_order) AS max FROM categories WHERE cafe_id = ?", cafe_id)
    current = row["max"] if row and row["max"] is not None else 0
    return int(current) + 1


async def create_category(db: Database, cafe_id: int, name: str, icon: Optional[str] = None,
                          description: Optional[str] = None, sort_order: Optional[int] = None) -> int:
    if sort_order is None:
        sort_order = await next_sort_order(db, cafe_id)
    result = await db.run(
        "INSERT INTO categories (cafe_id, name, icon, description, sort_order) VALUES (?, ?, ?, ?, ?)",
        cafe_id, name, icon or DEFAULT_CATEGORY_ICON, description, sort_order,
    )
    return result.last_insert_id


async def update_category(db: Database, cafe_id: int, category_id: int, updates: dict) -> int:
    values = {key: value for key, value in updates.items() if key in CATEGORY_COLUMNS}
    if not values:
        return 0
    assignments = ", ".join(f"{column} = ?" for column in values)
    result = await db.run(
        f"UPDATE categories SET {assignments} WHERE id = ? AND cafe_id = ?",
        *values.values(), category_id, cafe_id,
    )
    return result.changes


async def reorder_categories(db: Database, cafe_id: int, ordered_ids: Sequence[int]) -> None:
    async with db.transaction() as tx:
        for position, category_id in enumerate(ordered_ids):
            await tx.run(
                "UPDATE categories SET sort_order = ? WHERE id = ? AND cafe_id = ?",
                position, category_id, cafe_id,
            )


async def delete_category(db: Database, cafe_id: int, category_id: int) -> int:
    """Delete a category together with its items"""
    async with db.transaction() as tx:
        await tx.run("DELETE FROM menu_items WHERE category_id = ? AND cafe_id = ?", category_id, cafe_id)
        result = await tx.run("DELETE FROM categories WHERE id = ? AND cafe_id = ?", category_id, cafe_id)
    return result.changes


async def import_categories(db: Database, cafe_id: int, categories: Sequence[dict]) -> tuple:
    """
    Append categories (each with optional ``items``) after the existing ones.

    Used by the sample menu and by profile extraction. Returns
    ``(categories_added, items_added)``.
    """
    categories_added = 0
    items_added = 0
    async with db.transaction() as tx:
        sort_order = await next_sort_order(tx, cafe_id)
        for category in categories:
            name = (category.get("name") or "").strip()
            if not name:
                continue
            result = await tx.run(
                "INSERT INTO categories (cafe_id, name, icon, sort_order) VALUES (?, ?, ?, ?)",
                cafe_id, name, category.get("icon") or category_icon(name), sort_order,
            )
            category_id = result.last_insert_id
            sort_order += 1
            categories_added += 1

            for position, item in enumerate(category.get("items") or []):
                if not item.get("name"):
                    continue
                await tx.run(
                    "INSERT INTO menu_items (cafe_id, category_id, name, description, price, sort_order) "
                    "VALUES (?, ?, ?, ?, ?, ?)",
                    cafe_id, category_id, item["name"], item.get("description") or "",
                    item.get("price") or 0, position,
                )
                items_added += 1
    return categories_added, items_added
