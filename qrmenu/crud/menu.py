from collections import defaultdict
from typing import Dict, List

from qrmenu.crud import category as category_crud
from qrmenu.crud import menu_item as item_crud
from qrmenu.db import Database


def group_items(categories: List[dict], items: List[dict]) -> List[dict]:
    """Attach each item to its category, keeping both orderings. Orphan items are dropped."""
    by_category: Dict[int, List[dict]] = defaultdict(list)
    for item in items:
        by_category[item["category_id"]].append(item)
    return [{**category, "items": by_category.get(category["id"], [])} for category in categories]


async def get_full_menu(db: Database, cafe_id: int) -> List[dict]:
    """Every category and item, including inactive ones (admin view)"""
    categories = await category_crud.get_categories(db, cafe_id)
    items = await item_crud.get_items(db, cafe_id)
    return group_items(categories, items)


async def get_display_menu(db: Database, cafe_id: int) -> List[dict]:
    """Active categories with their available items, ready for the renderer"""
    categories = await category_crud.get_categories(db, cafe_id, active_only=True)
    items = await item_crud.get_items(db, cafe_id, available_only=True)
    return group_items(categories, items)
