# scripts/init_db.py
import asyncio

from qrmenu.core.config import get_settings
from qrmenu.crud import user as user_crud
from qrmenu.db import create_database, create_db_and_tables


async def create_tables():
    settings = get_settings()
    db = create_database(settings)
    try:
        await create_db_and_tables(db)
        print(f"✅ All missing tables created ({db.backend}).")
        if await user_crud.ensure_admin(db, settings.admin_email, settings.admin_password):
            print(f"👤 Created default admin: {settings.admin_email}")
    finally:
        await db.close()


if __name__ == "__main__":
    asyncio.run(create_tables())
