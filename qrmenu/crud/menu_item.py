from typing import Optional, Sequence

from qrmenu.db import Database

ITEM_FLAGS = (
    "is_vegan", "is_vegetarian", "is_gluten_free", "is_spicy",
    "is_bestseller", "is_popular", "is_new", "is_available",
)
ITEM_COLUMNS = (
    "category_id", "name", "description", "price", "original_price", "image", "calories",
    *ITEM_FLAGS, "sort_order",
)


def _normalize(values: dict) -> dict:
    row = {key: value for key, value in values.items() if key in ITEM_COLUMNS}
    for flag in ITEM_FLAGS:
        if flag in row and row[flag] is not None:
            row[flag] = 1 if row[flag] else 0
    return row


async def get_items(db: Database, cafe_id: int, available_only: bool = False):
    if available_only:
        return await db.all(
            "SELECT * FROM menu_items WHERE cafe_id = ? AND is_available = 1 ORDER BY sort_order ASC, id ASC",
            cafe_id,
        )
    return await db.all(
        "SELECT * FROM menu_items WHERE cafe_id = ? ORDER BY sort_order ASC, id ASC", cafe_id
    )


async def get_category_items(db: Database, cafe_id: int, category_id: int):
    return await db.all(
        "SELECT * FROM menu_items WHERE cafe_id = ? AND category_id = ? ORDER BY sort_order ASC, id ASC",
        cafe_id, category_id,
    )


async def get_item(db: Database, cafe_id: int, item_id: int) -> Optional[dict]:
    return await db.get("SELECT * FROM menu_items WHERE id = ? AND cafe_id = ?", item_id, cafe_id)


async def next_sort_order(db: Database, cafe_id: int, category_id: int) -> int:
    row = await db.get(
        "SELECT MAX(sort_order) AS max FROM menu_items WHERE cafe_id = ? AND category_id = ?",
        cafe_id, category_id,
    )
    current = row["max"] if row and row["max"] is not None else -1
    return int(current) + 1


async def create_item(db: Database, cafe_id: int, values: dict) -> int:
    row = _normalize(values)
    if row.get("sort_order") is None:
        row["sort_order"] = await next_sort_order(db, cafe_id, row["category_id"])
    row = {key: value for key, value in row.items() if value is not None}

    columns = ["cafe_id", *row.keys()]
    placeholders = ", ".join("?" for _ in columns)
    result = await db.run(
        f"INSERT INTO menu_items ({', '.join(columns)}) VALUES ({placeholders})",
        cafe_id, *row.values(),
    )
    return result.last_insert_id


async def update_item(db: Database, cafe_id: int, item_id: int, updates: dict) -> int:
    row = _normalize(updates)
    if not row:
        return 0
    assignments = ", ".join(f"{column} = ?" for column in row)
    result = await db.run(
        f"UPDATE menu_items SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ? AND cafe_id = ?",
        *row.values(), item_id, cafe_id,
    )
    return result.changes


async def toggle_availability(db: Database, cafe_id: int, item_id: int) -> Optional[bool]:
    item = await get_item(db, cafe_id, item_id)
    if not item:
        return None
    available = not bool(item["is_available"])
    await update_item(db, cafe_id, item_id, {"is_available": available})
    return available


async def reorder_items(db: Database, cafe_id: int, ordered_ids: Sequence[int]) -> None:
    async with db.transaction() as tx:
        for position, item_id in enumerate(ordered_ids):
            await tx.run(
                "UPDATE menu_items SET sort_order = ? WHERE id = ? AND cafe_id = ?",
                position, item_id, cafe_id,
            )


async def delete_item(db: Database, cafe_id: int, item_id: int) -> int:
    result = await db.run("DELETE FROM menu_items WHERE id = ? AND cafe_id = ?", item_id, cafe_id)
    return result.changes


async def bulk_create_items(db: Database, cafe_id: int, category_id: int, items: Sequence[dict]) -> int:
    created = 0
    async with db.transaction() as tx:
        sort_order = await next_sort_order(tx, cafe_id, category_id)
        for item in items:
            if not item.get("name"):
                continue
            await create_item(tx, cafe_id, {**item, "category_id": category_id, "sort_order": sort_order})
            sort_order += 1
            created += 1
    return created
