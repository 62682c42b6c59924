import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from qrmenu.auth.dependencies import require_cafe_access
from qrmenu.core.config import Settings, get_settings
from qrmenu.core.exceptions import CafeNotFound, DeploymentNotGenerated
from qrmenu.crud import activity as activity_crud
from qrmenu.crud import cafe as cafe_crud
from qrmenu.db import Database, get_db
from qrmenu.services.deploy import build_archive, deployment_status, generate_static_menu
from qrmenu.services.menu_renderer import MenuRenderError

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/deploy", tags=["deploy"])


@router.post("/{cafe_id}/generate")
async def generate(
    cafe_id: int,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        result = await generate_static_menu(db, cafe_id, settings)
    except CafeNotFound:
        raise HTTPException(status_code=404, detail="Cafe not found")
    except (MenuRenderError, OSError):
        log.exception("Menu generation failed for cafe %s", cafe_id)
        raise HTTPException(status_code=500, detail="Failed to generate deployment files")

    await activity_crud.log_activity(db, user["id"], "generate_deploy", f"Generated menu ({result.mode})", cafe_id)
    return {
        "success": True,
        "mode": result.mode,
        "deployedUrl": result.deployed_url,
        "previewUrl": result.preview_url,
    }


@router.get("/{cafe_id}/download")
async def download(
    cafe_id: int,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    cafe = await cafe_crud.get_cafe(db, cafe_id)
    if not cafe:
        raise HTTPException(status_code=404, detail="Cafe not found")

    try:
        archive = build_archive(settings.deploy_root, cafe["slug"])
    except DeploymentNotGenerated:
        raise HTTPException(status_code=400, detail="Deployment files not generated yet")

    return Response(
        content=archive,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{cafe["slug"]}-menu.zip"'},
    )


@router.get("/{cafe_id}/status")
async def status(
    cafe_id: int,
    user: dict = Depends(require_cafe_access),
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        return await deployment_status(db, cafe_id, settings)
    except CafeNotFound:
        raise HTTPException(status_code=404, detail="Cafe not found")
