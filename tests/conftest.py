import httpx
import pytest
import pytest_asyncio

from qrmenu.auth.security import create_access_token
from qrmenu.core.config import Settings
from qrmenu.crud import cafe as cafe_crud
from qrmenu.crud import user as user_crud
from qrmenu.db import create_database, create_db_and_tables
from qrmenu.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_backend="sqlite",
        sqlite_path=str(tmp_path / "qrmenu-test.db"),
        deploy_mode="filesystem",
        deploy_root=str(tmp_path / "deployed"),
        upload_root=str(tmp_path / "uploads"),
        base_url="http://testserver",
        jwt_secret="test-secret",
        admin_email="admin@test.com",
        admin_password="admin123",
    )


@pytest_asyncio.fixture
async def db(settings):
    database = create_database(settings)
    await create_db_and_tables(database)
    yield database
    await database.close()


@pytest.fixture
def app(settings, db):
    application = create_app(settings)
    application.state.db = db
    return application


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


# ---------------------------------------------------------------------------
# Data helpers
# ---------------------------------------------------------------------------

async def _auth_headers(db, settings, user_id: int) -> dict:
    user = await user_crud.get_user(db, user_id)
    return {"Authorization": f"Bearer {create_access_token(user, settings)}"}


@pytest_asyncio.fixture
async def admin_headers(db, settings):
    admin_id = await user_crud.create_user(
        db, email="admin@test.com", password="admin123", name="Admin", role="admin",
    )
    return await _auth_headers(db, settings, admin_id)


@pytest_asyncio.fixture
async def cafe(db):
    return await cafe_crud.create_cafe(db, {"name": "Café Verde", "tagline": "Fresh & green"})


@pytest_asyncio.fixture
async def owner_headers(db, settings, cafe):
    owner_id = await user_crud.create_user(
        db, email="owner@verde.com", password="owner123", name="Owner", role="owner", cafe_id=cafe["id"],
    )
    return await _auth_headers(db, settings, owner_id)
