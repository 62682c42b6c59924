import httpx
import pytest

from qrmenu.services.profile_extractor import STUB_NAME, extract_profile, parse_profile

LISTING = """
<html>
<head>
  <title>Blue Door Café - Google Maps</title>
  <meta property="og:description" content="Cozy   neighbourhood café">
</head>
<body>
  <h1 class="DUwDvf">Blue Door Café</h1>
  <button data-item-id="address"><div class="Io6YTe">221B Baker St, London</div></button>
  <button data-item-id="phone:tel:+44207"><div>+44 20 7946 0958</div></button>
  <div data-item-id="authority"><a href="https://bluedoor.example">bluedoor.example</a></div>
</body>
</html>
"""


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestParseProfile:
    def test_fields(self):
        profile = parse_profile(LISTING)
        assert profile.name == "Blue Door Café"
        assert profile.description == "Cozy neighbourhood café"
        assert profile.address == "221B Baker St, London"
        assert profile.phone == "+44 20 7946 0958"
        assert profile.website == "https://bluedoor.example"

    def test_title_fallback(self):
        profile = parse_profile("<html><head><title>Corner Shop - Google Maps</title></head></html>")
        assert profile.name == "Corner Shop"

    def test_empty_document(self):
        profile = parse_profile("")
        assert profile.name == ""
        assert profile.categories == []

    def test_to_cafe_fields_drops_empty(self):
        fields = parse_profile("<h1>Only Name</h1>").to_cafe_fields()
        assert fields["name"] == "Only Name"
        assert "phone" not in fields
        assert fields["primary_color"] == "#2C5F2D"


class TestExtractProfile:
    async def test_success(self):
        async with _client(lambda request: httpx.Response(200, text=LISTING)) as client:
            result = await extract_profile("https://maps.example/place", client=client)
        assert result.success
        assert result.error is None
        assert result.profile.name == "Blue Door Café"

    async def test_http_error_returns_stub(self):
        async with _client(lambda request: httpx.Response(503)) as client:
            result = await extract_profile("https://maps.example/place", client=client)
        assert not result.success
        assert result.profile.name == STUB_NAME
        assert result.error

    async def test_network_error_returns_stub(self):
        def handler(request):
            raise httpx.ConnectError("unreachable", request=request)

        async with _client(handler) as client:
            result = await extract_profile("https://maps.example/place", client=client)
        assert not result.success
        assert result.profile.name == STUB_NAME

    async def test_invalid_url_returns_stub(self):
        result = await extract_profile("not a url")
        assert not result.success
        assert result.profile.name == STUB_NAME

    async def test_page_without_name_gets_stub_name(self):
        async with _client(lambda request: httpx.Response(200, text="<html></html>")) as client:
            result = await extract_profile("https://maps.example/place", client=client)
        assert result.success
        assert result.profile.name == STUB_NAME
