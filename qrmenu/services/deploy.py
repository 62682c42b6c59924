"""
Deployment workflow

Fetches a café and its displayable menu, renders the page and records the
deployment. The steps are not atomic; rendering is a pure function of the
stored data, so retrying is always safe and the last write of the
"deployed" flag wins.
"""
import io
import logging
import zipfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from qrmenu.core.config import Settings
from qrmenu.core.exceptions import CafeNotFound, DeploymentNotGenerated
from qrmenu.crud import cafe as cafe_crud
from qrmenu.crud import menu as menu_crud
from qrmenu.db import Database
from qrmenu.services.menu_renderer import menu_file_path, render, write_menu_file

log = logging.getLogger(__name__)


@dataclass
class DeployResult:
    slug: str
    mode: str
    deployed_url: str
    preview_url: str
    path: Optional[Path] = None


def preview_path(slug: str) -> str:
    return f"/m/{slug}"


def public_menu_url(base_url: str, slug: str) -> str:
    """The URL encoded into QR codes when a café has no deployed URL yet."""
    return f"{base_url.rstrip('/')}{preview_path(slug)}"


def deployed_url_for(settings: Settings, slug: str) -> str:
    if settings.is_serverless:
        return public_menu_url(settings.base_url, slug)
    return f"{settings.base_url.rstrip('/')}/deployed/{slug}"


async def render_cafe_menu(db: Database, cafe_id: int) -> tuple:
    """Returns ``(cafe, html)``; raises CafeNotFound."""
    cafe = await cafe_crud.get_cafe(db, cafe_id)
    if not cafe:
        raise CafeNotFound(cafe_id)
    menu = await menu_crud.get_display_menu(db, cafe_id)
    return cafe, render(cafe, menu)


async def generate_static_menu(db: Database, cafe_id: int, settings: Settings,
                               now: Optional[datetime] = None) -> DeployResult:
    cafe, html = await render_cafe_menu(db, cafe_id)
    slug = cafe["slug"]
    mode = settings.resolved_deploy_mode

    path = None
    if mode == "filesystem":
        path = write_menu_file(html, settings.deploy_root, slug)
    else:
        # Read-only filesystem: the page is rendered on request at /m/<slug>
        log.info("Serverless deploy for '%s': skipping file output", slug)

    deployed_url = deployed_url_for(settings, slug)
    generated_at = (now or datetime.now(timezone.utc)).isoformat()
    await cafe_crud.mark_deployed(db, cafe_id, deployed_url, generated_at)

    return DeployResult(
        slug=slug,
        mode=mode,
        deployed_url=deployed_url,
        preview_url=preview_path(slug),
        path=path,
    )


def build_archive(deploy_root: str, slug: str) -> bytes:
    """Zip ``<deploy_root>/<slug>/`` with paths relative to that directory."""
    deploy_dir = Path(deploy_root) / slug
    if not deploy_dir.is_dir():
        raise DeploymentNotGenerated(slug)

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as archive:
        for file_path in sorted(deploy_dir.rglob("*")):
            arcname = file_path.relative_to(deploy_dir).as_posix()
            if file_path.is_dir():
                archive.writestr(arcname + "/", b"")
            else:
                archive.write(file_path, arcname)
    return buffer.getvalue()


async def deployment_status(db: Database, cafe_id: int, settings: Settings) -> dict:
    cafe = await cafe_crud.get_cafe(db, cafe_id)
    if not cafe:
        raise CafeNotFound(cafe_id)
    slug = cafe["slug"]
    return {
        "isDeployed": bool(cafe["is_deployed"]),
        "deployedUrl": cafe["deployed_url"],
        "previewUrl": preview_path(slug),
        "filesGenerated": menu_file_path(settings.deploy_root, slug) is not None,
        "lastGenerated": cafe.get("last_generated"),
    }
