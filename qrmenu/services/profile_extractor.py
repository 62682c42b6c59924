"""
Best-effort café profile extraction from a public business-listing page.

Listing pages change without notice and are often rendered client side, so
every field is optional and any failure degrades to a stub profile. Nothing
here raises to the caller.
"""
import logging
import re
from dataclasses import asdict, dataclass, field
from typing import List, Optional

import httpx
from bs4 import BeautifulSoup

from qrmenu.core.constants import DEFAULT_THEME

log = logging.getLogger(__name__)

STUB_NAME = "My Café"

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/124.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

_PHONE = re.compile(r"[\d\s\-\+\(\)]{7,}")
_NAME_SELECTORS = ("h1.DUwDvf", "h1.fontHeadlineLarge", "h1", ".qBF1Pd")


@dataclass
class CafeProfile:
    name: str = ""
    tagline: str = ""
    description: str = ""
    phone: str = ""
    address: str = ""
    website: str = ""
    categories: List[dict] = field(default_factory=list)
    theme: dict = field(default_factory=lambda: dict(DEFAULT_THEME))

    def to_cafe_fields(self) -> dict:
        """Non-empty fields in the shape ``crud.cafe.create_cafe`` expects."""
        fields = {
            "name": self.name,
            "tagline": self.tagline,
            "description": self.description,
            "phone": self.phone,
            "address": self.address,
            "website": self.website,
            **self.theme,
        }
        return {key: value for key, value in fields.items() if value}

    def as_dict(self) -> dict:
        return asdict(self)


@dataclass
class ExtractionResult:
    success: bool
    profile: CafeProfile
    error: Optional[str] = None


def _clean(text: Optional[str]) -> str:
    return " ".join((text or "").split())


def _meta(soup: BeautifulSoup, key: str) -> str:
    tag = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
    return _clean(tag.get("content")) if tag else ""


def _extract_name(soup: BeautifulSoup) -> str:
    for selector in _NAME_SELECTORS:
        el = soup.select_one(selector)
        if el and _clean(el.get_text()):
            return _clean(el.get_text())
    og_title = _meta(soup, "og:title")
    if og_title:
        return og_title.split(" - Google")[0].strip()
    title = _clean(soup.title.get_text()) if soup.title else ""
    if " - Google" in title:
        return title.split(" - Google")[0].strip()
    return title


def _extract_phone(soup: BeautifulSoup) -> str:
    el = soup.select_one('[data-item-id*="phone"]')
    if el:
        match = _PHONE.search(el.get_text())
        if match:
            return match.group(0).strip()
    tel = soup.select_one('a[href^="tel:"]')
    return tel["href"].replace("tel:", "").strip() if tel else ""


def _extract_address(soup: BeautifulSoup) -> str:
    el = soup.select_one('[data-item-id="address"]')
    if not el:
        return ""
    text_el = el.select_one(".Io6YTe, .fontBodyMedium") or el
    return _clean(text_el.get_text())


def _extract_website(soup: BeautifulSoup) -> str:
    el = soup.select_one('[data-item-id="authority"] a') or soup.select_one('a[data-item-id="authority"]')
    return el.get("href", "").strip() if el else ""


def parse_profile(html: str) -> CafeProfile:
    soup = BeautifulSoup(html, "html.parser")
    return CafeProfile(
        name=_extract_name(soup),
        description=_meta(soup, "og:description") or _meta(soup, "description"),
        phone=_extract_phone(soup),
        address=_extract_address(soup),
        website=_extract_website(soup),
    )


async def extract_profile(url: str, timeout: float = 15.0,
                          client: Optional[httpx.AsyncClient] = None) -> ExtractionResult:
    """
    Fetch ``url`` and pull whatever profile fields can be found.

    On any failure the result has ``success=False`` and a stub profile
    named ``STUB_NAME``; callers proceed with it.
    """
    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(headers=DEFAULT_HEADERS, follow_redirects=True, timeout=timeout)
    try:
        resp = await client.get(url)
        resp.raise_for_status()
        profile = parse_profile(resp.text)
    except (httpx.HTTPError, ValueError) as e:
        log.warning("Profile extraction failed for %s: %s", url, e)
        return ExtractionResult(success=False, profile=CafeProfile(name=STUB_NAME), error=str(e))
    except Exception as e:  # extraction never raises
        log.exception("Unexpected profile extraction error for %s", url)
        return ExtractionResult(success=False, profile=CafeProfile(name=STUB_NAME), error=str(e))
    finally:
        if owns_client:
            await client.aclose()

    if not profile.name:
        profile.name = STUB_NAME
    log.info("Extracted café profile from %s: name=%r phone=%r", url, profile.name, profile.phone)
    return ExtractionResult(success=True, profile=profile)
