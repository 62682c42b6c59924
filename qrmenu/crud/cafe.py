import re
from typing import Optional

from qrmenu.core.constants import DEFAULT_CURRENCY, DEFAULT_THEME
from qrmenu.db import Database

# Columns writable through create/update
CAFE_COLUMNS = (
    "name", "tagline", "description", "logo", "cover_image",
    "phone", "email", "address", "website", "google_link", "instagram", "facebook",
    "currency", "primary_color", "secondary_color", "accent_color", "background_color", "text_color",
    "is_published",
)

PUBLIC_CAFE_COLUMNS = """
    id, name, slug, tagline, description, logo, cover_image,
    phone, email, address, website, instagram, facebook, currency,
    primary_color, secondary_color, accent_color, background_color, text_color,
    is_published
"""


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (name or "").lower())
    slug = re.sub(r"-+", "-", slug).strip("-")
    return slug or "cafe"


async def slug_exists(db: Database, slug: str) -> bool:
    return await db.get("SELECT id FROM cafes WHERE slug = ?", slug) is not None


async def generate_unique_slug(db: Database, name: str) -> str:
    """Slugify ``name``; on collision append -1, -2, ..."""
    original = slugify(name)
    slug = original
    counter = 1
    while await slug_exists(db, slug):
        slug = f"{original}-{counter}"
        counter += 1
    return slug


async def get_cafe(db: Database, cafe_id: int) -> Optional[dict]:
    return await db.get("SELECT * FROM cafes WHERE id = ?", cafe_id)


async def get_public_cafe(db: Database, slug: str) -> Optional[dict]:
    return await db.get(f"SELECT {PUBLIC_CAFE_COLUMNS} FROM cafes WHERE slug = ?", slug)


async def get_cafes_for_user(db: Database, user: dict):
    """Admins see every café, owners only their own"""
    if user["role"] == "admin":
        return await db.all("SELECT * FROM cafes ORDER BY created_at DESC, id DESC")
    return await db.all("SELECT * FROM cafes WHERE id = ?", user.get("cafe_id"))


async def get_cafes_with_counts(db: Database):
    # One row per café; the first linked owner is reported
    return await db.all("""
        SELECT c.*, u.name AS owner_name, u.email AS owner_email,
               (SELECT COUNT(*) FROM categories WHERE cafe_id = c.id) AS category_count,
               (SELECT COUNT(*) FROM menu_items WHERE cafe_id = c.id) AS item_count
        FROM cafes c
        LEFT JOIN users u ON u.id = (SELECT MIN(id) FROM users WHERE cafe_id = c.id)
        ORDER BY c.created_at DESC, c.id DESC
    """)


async def create_cafe(db: Database, fields: dict, created_by: Optional[int] = None) -> dict:
    """Insert a café with a fresh unique slug. Returns ``{"id", "slug", "name"}``."""
    values = {key: fields[key] for key in CAFE_COLUMNS if fields.get(key) is not None}
    values.setdefault("currency", DEFAULT_CURRENCY)
    for key, default in DEFAULT_THEME.items():
        values.setdefault(key, default)

    name = values.get("name") or "New Cafe"
    values["name"] = name
    slug = await generate_unique_slug(db, name)

    columns = ["slug", *values.keys(), "created_by"]
    placeholders = ", ".join("?" for _ in columns)
    result = await db.run(
        f"INSERT INTO cafes ({', '.join(columns)}) VALUES ({placeholders})",
        slug, *values.values(), created_by,
    )
    return {"id": result.last_insert_id, "slug": slug, "name": name}


async def update_cafe(db: Database, cafe_id: int, updates: dict) -> None:
    """Partial update; keys outside ``CAFE_COLUMNS`` are ignored"""
    values = {key: value for key, value in updates.items() if key in CAFE_COLUMNS}
    if not values:
        return
    assignments = ", ".join(f"{column} = ?" for column in values)
    await db.run(
        f"UPDATE cafes SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        *values.values(), cafe_id,
    )


async def set_published(db: Database, cafe_id: int, published: bool) -> None:
    await db.run(
        "UPDATE cafes SET is_published = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        1 if published else 0, cafe_id,
    )


async def set_qr_code_path(db: Database, cafe_id: int, qr_path: str) -> None:
    await db.run(
        "UPDATE cafes SET qr_code_path = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        qr_path, cafe_id,
    )


async def mark_deployed(db: Database, cafe_id: int, deployed_url: str, generated_at: str) -> None:
    await db.run(
        "UPDATE cafes SET is_deployed = 1, deployed_url = ?, last_generated = ?, "
        "updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        deployed_url, generated_at, cafe_id,
    )


async def delete_cafe(db: Database, cafe_id: int) -> None:
    """Delete a café with its menu; owners are unlinked, not deleted"""
    async with db.transaction() as tx:
        await tx.run("DELETE FROM menu_items WHERE cafe_id = ?", cafe_id)
        await tx.run("DELETE FROM categories WHERE cafe_id = ?", cafe_id)
        await tx.run("UPDATE users SET cafe_id = NULL WHERE cafe_id = ?", cafe_id)
        await tx.run("DELETE FROM cafes WHERE id = ?", cafe_id)


async def get_stats(db: Database) -> dict:
    async def count(sql: str) -> int:
        row = await db.get(sql)
        return int(row["count"]) if row else 0

    return {
        "totalCafes": await count("SELECT COUNT(*) AS count FROM cafes"),
        "publishedCafes": await count("SELECT COUNT(*) AS count FROM cafes WHERE is_published = 1"),
        "deployedCafes": await count("SELECT COUNT(*) AS count FROM cafes WHERE is_deployed = 1"),
        "totalOwners": await count("SELECT COUNT(*) AS count FROM users WHERE role = 'owner'"),
        "totalItems": await count("SELECT COUNT(*) AS count FROM menu_items"),
        "totalCategories": await count("SELECT COUNT(*) AS count FROM categories"),
    }


async def recent_cafes(db: Database, limit: int = 5):
    return await db.all("""
        SELECT c.*, u.name AS owner_name
        FROM cafes c
        LEFT JOIN users u ON u.id = (SELECT MIN(id) FROM users WHERE cafe_id = c.id)
        ORDER BY c.created_at DESC, c.id DESC
        LIMIT ?
    """, limit)
