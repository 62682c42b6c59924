### qrmenu/main.py
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from qrmenu.api import admin_routes, auth_routes, cafe_routes, deploy_routes, menu_routes, public_routes
from qrmenu.core.config import Settings, get_settings
from qrmenu.core.constants import ensure_upload_dirs
from qrmenu.core.logging import configure_logging
from qrmenu.crud import user as user_crud
from qrmenu.db import create_database, create_db_and_tables

log = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        log.info("🔧 Starting DB setup...")
        db = create_database(settings)
        await create_db_and_tables(db)
        log.info("✅ DB schema ready (%s).", db.backend)

        if await user_crud.ensure_admin(db, settings.admin_email, settings.admin_password):
            log.info("👤 Created default admin %s", settings.admin_email)

        if not settings.is_serverless:
            ensure_upload_dirs(settings.upload_root)
            os.makedirs(settings.deploy_root, exist_ok=True)

        app.state.db = db
        yield
        await db.close()

    app = FastAPI(
        title="QR Menu API",
        version="1.0.0",
        description="Manage cafés and their menus, and publish them as static QR-linked pages.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.dependency_overrides[get_settings] = lambda: settings

    # ✅ Allow the dashboard frontend (CORS)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ✅ Uploaded logos, item photos and QR codes; generated menus in filesystem mode
    app.mount("/uploads", StaticFiles(directory=settings.upload_root, check_dir=False), name="uploads")
    if not settings.is_serverless:
        app.mount(
            "/deployed",
            StaticFiles(directory=settings.deploy_root, html=True, check_dir=False),
            name="deployed",
        )

    app.include_router(auth_routes.router)
    app.include_router(admin_routes.router)
    app.include_router(cafe_routes.router)
    app.include_router(menu_routes.router)
    app.include_router(deploy_routes.router)
    app.include_router(public_routes.router)
    return app


app = create_app()
