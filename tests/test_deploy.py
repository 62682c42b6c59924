import io
import zipfile
from datetime import datetime, timezone

import pytest

from qrmenu.core.exceptions import CafeNotFound, DeploymentNotGenerated
from qrmenu.crud import cafe as cafe_crud
from qrmenu.crud import category as category_crud
from qrmenu.crud import menu_item as item_crud
from qrmenu.services.deploy import build_archive, deployment_status, generate_static_menu, public_menu_url
from qrmenu.services.qr import generate_qr_code, make_qr_png, qr_data_url

NOW = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


class TestGenerateStaticMenu:
    async def test_filesystem_mode_writes_page(self, db, settings, cafe, tmp_path):
        category_id = await category_crud.create_category(db, cafe["id"], "Drinks", "☕")
        await item_crud.create_item(db, cafe["id"], {"category_id": category_id, "name": "Latte", "price": 4})

        result = await generate_static_menu(db, cafe["id"], settings, now=NOW)

        index = tmp_path / "deployed" / cafe["slug"] / "index.html"
        assert result.path == index
        assert index.exists()
        html = index.read_text(encoding="utf-8")
        assert '<div class="item-name">Latte</div>' in html
        assert result.mode == "filesystem"
        assert result.deployed_url == f"http://testserver/deployed/{cafe['slug']}"
        assert result.preview_url == f"/m/{cafe['slug']}"

        row = await cafe_crud.get_cafe(db, cafe["id"])
        assert row["is_deployed"] == 1
        assert row["deployed_url"] == result.deployed_url
        assert row["last_generated"] == NOW.isoformat()

    async def test_serverless_mode_writes_nothing(self, db, settings, cafe, tmp_path):
        settings.deploy_mode = "serverless"
        result = await generate_static_menu(db, cafe["id"], settings)

        assert result.path is None
        assert not (tmp_path / "deployed").exists()
        assert result.deployed_url == f"http://testserver/m/{cafe['slug']}"
        row = await cafe_crud.get_cafe(db, cafe["id"])
        assert row["is_deployed"] == 1

    async def test_vercel_implies_serverless(self, settings):
        settings.deploy_mode = None
        settings.vercel = "1"
        assert settings.resolved_deploy_mode == "serverless"

    async def test_regenerate_overwrites(self, db, settings, cafe, tmp_path):
        await generate_static_menu(db, cafe["id"], settings)
        await cafe_crud.update_cafe(db, cafe["id"], {"tagline": "Second edition"})
        await generate_static_menu(db, cafe["id"], settings)
        html = (tmp_path / "deployed" / cafe["slug"] / "index.html").read_text(encoding="utf-8")
        assert "Second edition" in html

    async def test_unknown_cafe(self, db, settings):
        with pytest.raises(CafeNotFound):
            await generate_static_menu(db, 999, settings)


class TestArchiveAndStatus:
    async def test_archive_contains_index(self, db, settings, cafe):
        await generate_static_menu(db, cafe["id"], settings)
        archive = zipfile.ZipFile(io.BytesIO(build_archive(settings.deploy_root, cafe["slug"])))
        assert "index.html" in archive.namelist()
        assert "images/" in archive.namelist()

    def test_archive_before_generation(self, settings):
        with pytest.raises(DeploymentNotGenerated):
            build_archive(settings.deploy_root, "never-built")

    async def test_status(self, db, settings, cafe):
        before = await deployment_status(db, cafe["id"], settings)
        assert before["isDeployed"] is False
        assert before["filesGenerated"] is False

        await generate_static_menu(db, cafe["id"], settings, now=NOW)
        after = await deployment_status(db, cafe["id"], settings)
        assert after["isDeployed"] is True
        assert after["filesGenerated"] is True
        assert after["previewUrl"] == f"/m/{cafe['slug']}"
        assert after["lastGenerated"] == NOW.isoformat()


class TestQRCodes:
    def test_png_bytes(self):
        png = make_qr_png("http://testserver/m/cafe-verde", "#2C5F2D")
        assert png.startswith(b"\x89PNG")

    def test_data_url(self):
        assert qr_data_url(b"abc") == "data:image/png;base64,YWJj"

    def test_saved_to_uploads(self, tmp_path):
        path = generate_qr_code("http://x/m/a", "a", str(tmp_path), serverless=False)
        assert path == "/uploads/qrcodes/a-qr.png"
        assert (tmp_path / "qrcodes" / "a-qr.png").exists()

    def test_serverless_returns_data_url(self, tmp_path):
        path = generate_qr_code("http://x/m/a", "a", str(tmp_path), serverless=True)
        assert path.startswith("data:image/png;base64,")
        assert not (tmp_path / "qrcodes").exists()

    def test_public_menu_url(self):
        assert public_menu_url("http://host/", "verde") == "http://host/m/verde"
