from typing import Optional

from qrmenu.auth.security import hash_password
from qrmenu.db import Database


async def get_user(db: Database, user_id: int) -> Optional[dict]:
    return await db.get("SELECT * FROM users WHERE id = ?", user_id)


async def get_active_user(db: Database, user_id: int) -> Optional[dict]:
    return await db.get("SELECT * FROM users WHERE id = ? AND is_active = 1", user_id)


async def get_active_user_by_email(db: Database, email: str) -> Optional[dict]:
    return await db.get("SELECT * FROM users WHERE email = ? AND is_active = 1", email)


async def email_exists(db: Database, email: str, exclude_id: Optional[int] = None) -> bool:
    if exclude_id is None:
        row = await db.get("SELECT id FROM users WHERE email = ?", email)
    else:
        row = await db.get("SELECT id FROM users WHERE email = ? AND id != ?", email, exclude_id)
    return row is not None


async def create_user(db: Database, *, email: str, password: str, name: str,
                      role: str = "owner", cafe_id: Optional[int] = None) -> int:
    """Create a user and return its id"""
    result = await db.run(
        "INSERT INTO users (email, password, name, role, cafe_id) VALUES (?, ?, ?, ?, ?)",
        email, hash_password(password), name, role, cafe_id,
    )
    return result.last_insert_id


async def set_password(db: Database, user_id: int, new_password: str) -> None:
    await db.run(
        "UPDATE users SET password = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
        hash_password(new_password), user_id,
    )


async def list_owners(db: Database):
    return await db.all("""
        SELECT u.id, u.email, u.name, u.is_active, u.created_at,
               c.id AS cafe_id, c.name AS cafe_name, c.slug AS cafe_slug
        FROM users u
        LEFT JOIN cafes c ON u.cafe_id = c.id
        WHERE u.role = 'owner'
        ORDER BY u.created_at DESC, u.id DESC
    """)


async def update_owner(db: Database, user_id: int, updates: dict) -> None:
    """Apply a partial update; ``password`` is hashed before storage"""
    fields = dict(updates)
    if fields.get("password"):
        fields["password"] = hash_password(fields["password"])
    else:
        fields.pop("password", None)
    if not fields:
        return

    assignments = ", ".join(f"{column} = ?" for column in fields)
    await db.run(
        f"UPDATE users SET {assignments}, updated_at = CURRENT_TIMESTAMP WHERE id = ? AND role = 'owner'",
        *fields.values(), user_id,
    )


async def delete_owner(db: Database, user_id: int) -> int:
    result = await db.run("DELETE FROM users WHERE id = ? AND role = 'owner'", user_id)
    return result.changes


async def ensure_admin(db: Database, email: str, password: str) -> bool:
    """Create the bootstrap admin when missing; returns True if one was created"""
    if await db.get("SELECT id FROM users WHERE email = ?", email):
        return False
    await create_user(db, email=email, password=password, name="System Admin", role="admin")
    return True


def public_user(user: dict) -> dict:
    return {
        "id": user["id"],
        "email": user["email"],
        "name": user["name"],
        "role": user["role"],
        "cafeId": user.get("cafe_id"),
    }
