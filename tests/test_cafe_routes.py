import pytest

from qrmenu.api import cafe_routes
from qrmenu.crud import cafe as cafe_crud
from qrmenu.crud import category as category_crud
from qrmenu.crud import user as user_crud
from qrmenu.services.profile_extractor import STUB_NAME, CafeProfile, ExtractionResult

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _fake_extractor(result: ExtractionResult):
    async def fake(url, *args, **kwargs):
        return result
    return fake


class TestCreateCafe:
    async def test_manual(self, client, db, admin_headers):
        resp = await client.post(
            "/api/cafe/manual", headers=admin_headers,
            data={"name": "Bean There", "tagline": "Good beans", "currency": "$"},
        )
        assert resp.status_code == 200
        created = resp.json()["cafe"]
        assert created["slug"] == "bean-there"

        row = await cafe_crud.get_cafe(db, created["id"])
        assert row["currency"] == "$"
        assert row["tagline"] == "Good beans"
        assert row["logo"] is None

    async def test_manual_with_logo(self, client, db, admin_headers, tmp_path):
        resp = await client.post(
            "/api/cafe/manual", headers=admin_headers,
            data={"name": "Logo Cafe"},
            files={"logo": ("logo.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 200
        row = await cafe_crud.get_cafe(db, resp.json()["cafe"]["id"])
        assert row["logo"].startswith("/uploads/logos/")
        assert (tmp_path / "uploads" / "logos" / row["logo"].rsplit("/", 1)[1]).exists()

    async def test_manual_rejects_non_image(self, client, admin_headers):
        resp = await client.post(
            "/api/cafe/manual", headers=admin_headers,
            data={"name": "Bad Logo"},
            files={"logo": ("notes.txt", b"hello", "text/plain")},
        )
        assert resp.status_code == 400

    async def test_manual_requires_admin(self, client, owner_headers):
        resp = await client.post("/api/cafe/manual", headers=owner_headers, data={"name": "Nope"})
        assert resp.status_code == 403

    async def test_from_google_failure_falls_back_to_stub(self, client, db, admin_headers, monkeypatch):
        failed = ExtractionResult(success=False, profile=CafeProfile(name=STUB_NAME), error="timeout")
        monkeypatch.setattr(cafe_routes, "extract_profile", _fake_extractor(failed))

        resp = await client.post(
            "/api/cafe/from-google", headers=admin_headers, json={"googleUrl": "https://maps.example/x"},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["extracted"] is False
        row = await cafe_crud.get_cafe(db, body["cafe"]["id"])
        assert row["name"] == STUB_NAME
        assert row["google_link"] == "https://maps.example/x"

    async def test_from_google_links_owner(self, client, db, admin_headers, monkeypatch):
        profile = CafeProfile(name="Blue Door", phone="+44 20")
        monkeypatch.setattr(cafe_routes, "extract_profile", _fake_extractor(ExtractionResult(True, profile)))
        owner_id = await user_crud.create_user(db, email="o@x.com", password="secret1", name="O")

        resp = await client.post(
            "/api/cafe/from-google", headers=admin_headers,
            json={"googleLink": "https://maps.example/y", "ownerId": owner_id},
        )
        cafe_id = resp.json()["cafe"]["id"]
        assert (await user_crud.get_user(db, owner_id))["cafe_id"] == cafe_id
        assert (await cafe_crud.get_cafe(db, cafe_id))["phone"] == "+44 20"

    async def test_from_google_requires_link(self, client, admin_headers):
        resp = await client.post("/api/cafe/from-google", headers=admin_headers, json={})
        assert resp.status_code == 400


class TestMenuSeeding:
    async def test_sample_menu(self, client, db, owner_headers, cafe):
        resp = await client.post(f"/api/cafe/{cafe['id']}/sample-menu", headers=owner_headers)
        assert resp.status_code == 200
        assert resp.json()["categoriesAdded"] == 3
        assert resp.json()["itemsAdded"] == 7

    async def test_sample_menu_missing_cafe(self, client, admin_headers):
        resp = await client.post("/api/cafe/999/sample-menu", headers=admin_headers)
        assert resp.status_code == 404

    async def test_extract_menu(self, client, db, owner_headers, cafe, monkeypatch):
        profile = CafeProfile(name="X", categories=[{"name": "Soups", "items": [{"name": "Tomato", "price": 4}]}])
        monkeypatch.setattr(cafe_routes, "extract_profile", _fake_extractor(ExtractionResult(True, profile)))

        resp = await client.post(
            f"/api/cafe/{cafe['id']}/extract-menu", headers=owner_headers,
            json={"googleUrl": "https://maps.example/z"},
        )
        assert resp.json()["categoriesAdded"] == 1
        assert resp.json()["itemsAdded"] == 1
        categories = await category_crud.get_categories(db, cafe["id"])
        assert categories[0]["name"] == "Soups"


class TestUpdateCafe:
    async def test_partial_update(self, client, db, owner_headers, cafe):
        resp = await client.put(
            f"/api/cafe/{cafe['id']}", headers=owner_headers,
            data={"tagline": "Brand new", "primaryColor": "#000000", "is_published": "true"},
        )
        assert resp.status_code == 200
        row = await cafe_crud.get_cafe(db, cafe["id"])
        assert row["tagline"] == "Brand new"
        assert row["primary_color"] == "#000000"
        assert row["is_published"] == 1
        assert row["name"] == "Café Verde"

    async def test_blank_name_keeps_existing(self, client, db, owner_headers, cafe):
        await client.put(f"/api/cafe/{cafe['id']}", headers=owner_headers, data={"name": ""})
        assert (await cafe_crud.get_cafe(db, cafe["id"]))["name"] == "Café Verde"

    @pytest.mark.parametrize("publish", [True, False])
    async def test_publish(self, client, db, owner_headers, cafe, publish):
        resp = await client.post(f"/api/cafe/{cafe['id']}/publish", headers=owner_headers, json={"publish": publish})
        assert resp.json() == {"success": True, "isPublished": publish}
        assert (await cafe_crud.get_cafe(db, cafe["id"]))["is_published"] == int(publish)


class TestQRAndDelete:
    async def test_generate_qr(self, client, db, owner_headers, cafe, tmp_path):
        resp = await client.post(f"/api/cafe/{cafe['id']}/generate-qr", headers=owner_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["menuUrl"] == f"http://testserver/m/{cafe['slug']}"
        assert body["qrCode"] == f"/uploads/qrcodes/{cafe['slug']}-qr.png"
        assert (tmp_path / "uploads" / "qrcodes" / f"{cafe['slug']}-qr.png").exists()
        assert (await cafe_crud.get_cafe(db, cafe["id"]))["qr_code_path"] == body["qrCode"]

    async def test_qr_prefers_deployed_url(self, client, db, owner_headers, cafe):
        await cafe_crud.mark_deployed(db, cafe["id"], "https://menus.example/verde", "2026-10-19T00:00:00")
        resp = await client.post(f"/api/cafe/{cafe['id']}/generate-qr", headers=owner_headers)
        assert resp.json()["menuUrl"] == "https://menus.example/verde"

    async def test_delete_requires_admin(self, client, owner_headers, cafe):
        resp = await client.delete(f"/api/cafe/{cafe['id']}", headers=owner_headers)
        assert resp.status_code == 403

    async def test_delete(self, client, db, admin_headers, cafe):
        resp = await client.delete(f"/api/cafe/{cafe['id']}", headers=admin_headers)
        assert resp.status_code == 200
        assert await cafe_crud.get_cafe(db, cafe["id"]) is None
        assert (await client.delete(f"/api/cafe/{cafe['id']}", headers=admin_headers)).status_code == 404
