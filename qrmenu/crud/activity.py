from typing import Optional

from qrmenu.db import Database


async def log_activity(db: Database, user_id: Optional[int], action: str,
                       details: str = "", cafe_id: Optional[int] = None) -> None:
    await db.run(
        "INSERT INTO activity_log (user_id, cafe_id, action, details) VALUES (?, ?, ?, ?)",
        user_id, cafe_id, action, details,
    )


async def recent_activity(db: Database, limit: int = 10):
    return await db.all("""
        SELECT al.*, u.name AS user_name, c.name AS cafe_name
        FROM activity_log al
        LEFT JOIN users u ON al.user_id = u.id
        LEFT JOIN cafes c ON al.cafe_id = c.id
        ORDER BY al.created_at DESC, al.id DESC
        LIMIT ?
    """, limit)
