"""
Typed sections of a menu page.

Each section is a frozen dataclass naming the template that renders it. The
builders in this module turn raw café/category/item records (mappings or
attribute objects) into sections, applying defaults and dropping malformed
optional fields. No section ever holds pre-built HTML for user text; escaping
happens when the template is rendered.
"""
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar, Optional, Sequence, Tuple

from markupsafe import Markup

from qrmenu.services.menu_renderer.escaping import trusted_url

DEFAULT_CURRENCY = "₹"
DEFAULT_DESCRIPTION = "View our delicious menu"
LOGO_PLACEHOLDER = "☕"
ITEM_PLACEHOLDER = "🍽️"


class MenuRenderError(ValueError):
    """Raised when the café record lacks the fields a page cannot be built without."""


def field_value(record, name: str, default=None):
    if record is None:
        return default
    if isinstance(record, Mapping):
        value = record.get(name, default)
    else:
        value = getattr(record, name, default)
    return default if value is None else value


def _text(record, name: str) -> str:
    value = field_value(record, name)
    if value is None:
        return ""
    return str(value).strip()


def _flag(record, name: str) -> bool:
    value = field_value(record, name)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _number(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def format_money(currency: str, value) -> str:
    """``<currency><value to 2 decimals>``; missing or malformed values render as 0.00."""
    number = _number(value) or 0.0
    return f"{currency}{number:.2f}"


# ---------- Theme ----------

@dataclass(frozen=True)
class Theme:
    primary: str = "#D4A574"
    secondary: str = "#8B7355"
    accent: str = "#F5E6D3"
    background: str = "#FAF7F2"
    text: str = "#4A4A4A"

    @classmethod
    def from_cafe(cls, cafe) -> "Theme":
        defaults = cls()
        return cls(
            primary=_text(cafe, "primary_color") or defaults.primary,
            secondary=_text(cafe, "secondary_color") or defaults.secondary,
            accent=_text(cafe, "accent_color") or defaults.accent,
            background=_text(cafe, "background_color") or defaults.background,
            text=_text(cafe, "text_color") or defaults.text,
        )


# ---------- Sections ----------

@dataclass(frozen=True)
class HeadSection:
    template: ClassVar[str] = "head.html"
    title: str
    description: str
    theme: Theme


@dataclass(frozen=True)
class HeaderSection:
    template: ClassVar[str] = "header.html"
    name: str
    tagline: str = ""
    logo_url: Optional[Markup] = None
    placeholder: str = LOGO_PLACEHOLDER


@dataclass(frozen=True)
class ContactLink:
    kind: str  # phone | email | website
    href: Markup
    label: str


@dataclass(frozen=True)
class ContactBarSection:
    template: ClassVar[str] = "contact_bar.html"
    contacts: Tuple[ContactLink, ...]


@dataclass(frozen=True)
class NavButton:
    category_id: str
    icon: str
    name: str
    active: bool = False


@dataclass(frozen=True)
class NavSection:
    template: ClassVar[str] = "nav.html"
    buttons: Tuple[NavButton, ...]


@dataclass(frozen=True)
class Badge:
    css_class: str
    label: str


# Display priority, independent of how flags are declared on the item.
BADGES = (
    ("is_bestseller", Badge("badge-bestseller", "⭐ Bestseller")),
    ("is_new", Badge("badge-new", "🆕 New")),
    ("is_vegan", Badge("badge-vegan", "🌱 Vegan")),
    ("is_vegetarian", Badge("badge-vegetarian", "🥬 Vegetarian")),
    ("is_spicy", Badge("badge-spicy", "🌶️ Spicy")),
    ("is_gluten_free", Badge("badge-gf", "GF")),
)


@dataclass(frozen=True)
class ItemCard:
    name: str
    price: str
    badges: Tuple[Badge, ...] = ()
    image_url: Optional[Markup] = None
    original_price: Optional[str] = None
    description: str = ""
    calories: Optional[int] = None
    placeholder: str = ITEM_PLACEHOLDER


@dataclass(frozen=True)
class CategorySection:
    template: ClassVar[str] = "category.html"
    category_id: str
    name: str
    icon: str = ""
    description: str = ""
    items: Tuple[ItemCard, ...] = ()


@dataclass(frozen=True)
class EmptyMenuSection:
    template: ClassVar[str] = "empty_menu.html"


@dataclass(frozen=True)
class SocialLink:
    network: str
    href: Markup
    title: str


@dataclass(frozen=True)
class FooterSection:
    template: ClassVar[str] = "footer.html"
    name: str
    address: str = ""
    socials: Tuple[SocialLink, ...] = ()
    powered_by: str = "Powered by QR Menu System"


@dataclass(frozen=True)
class ScriptSection:
    template: ClassVar[str] = "script.html"


@dataclass(frozen=True)
class MenuPage:
    head: HeadSection
    header: HeaderSection
    contact_bar: Optional[ContactBarSection]
    nav: Optional[NavSection]
    content: Tuple[object, ...]
    footer: FooterSection
    script: ScriptSection = field(default_factory=ScriptSection)


# ---------- Builders ----------

def _category_id(category, position: int) -> str:
    value = field_value(category, "id")
    return str(value) if value is not None else str(position)


def _category_items(category) -> Sequence:
    items = field_value(category, "items", ())
    if isinstance(items, (str, bytes, Mapping)) or not hasattr(items, "__iter__"):
        return ()
    return items


def build_contact_bar(cafe) -> Optional[ContactBarSection]:
    contacts = []
    phone = _text(cafe, "phone")
    if phone:
        contacts.append(ContactLink("phone", trusted_url(f"tel:{phone}"), phone))
    email = _text(cafe, "email")
    if email:
        contacts.append(ContactLink("email", trusted_url(f"mailto:{email}"), "Email Us"))
    website = _text(cafe, "website")
    if website:
        contacts.append(ContactLink("website", trusted_url(website), "Website"))
    if not contacts:
        return None
    return ContactBarSection(contacts=tuple(contacts))


def build_socials(cafe) -> Tuple[SocialLink, ...]:
    socials = []
    instagram = _text(cafe, "instagram")
    if instagram:
        socials.append(SocialLink("instagram", trusted_url(f"https://instagram.com/{instagram}"), "Instagram"))
    facebook = _text(cafe, "facebook")
    if facebook:
        socials.append(SocialLink("facebook", trusted_url(f"https://facebook.com/{facebook}"), "Facebook"))
    return tuple(socials)


def build_item_card(item, currency: str) -> ItemCard:
    badges = tuple(badge for flag, badge in BADGES if _flag(item, flag))

    original = _number(field_value(item, "original_price"))
    original_price = format_money(currency, original) if original else None

    calories = _number(field_value(item, "calories"))
    image = _text(item, "image")

    return ItemCard(
        name=_text(item, "name"),
        price=format_money(currency, field_value(item, "price")),
        badges=badges,
        image_url=trusted_url(image) if image else None,
        original_price=original_price,
        description=_text(item, "description"),
        calories=int(calories) if calories else None,
    )


def build_category_section(category, position: int, currency: str) -> CategorySection:
    return CategorySection(
        category_id=_category_id(category, position),
        name=_text(category, "name"),
        icon=_text(category, "icon"),
        description=_text(category, "description"),
        items=tuple(build_item_card(item, currency) for item in _category_items(category)),
    )


def build_page(cafe, categories_with_items) -> MenuPage:
    name = _text(cafe, "name")
    slug = _text(cafe, "slug")
    if not name or not slug:
        missing = [key for key, value in (("name", name), ("slug", slug)) if not value]
        raise MenuRenderError(f"Cafe record is missing required field(s): {', '.join(missing)}")

    currency = _text(cafe, "currency") or DEFAULT_CURRENCY
    tagline = _text(cafe, "tagline")
    logo = _text(cafe, "logo")

    categories = [
        build_category_section(category, position, currency)
        for position, category in enumerate(categories_with_items or (), start=1)
    ]

    nav = None
    content: Tuple[object, ...] = (EmptyMenuSection(),)
    if categories:
        nav = NavSection(buttons=tuple(
            NavButton(category_id=c.category_id, icon=c.icon, name=c.name, active=(i == 0))
            for i, c in enumerate(categories)
        ))
        content = tuple(categories)

    return MenuPage(
        head=HeadSection(
            title=f"{name} - Menu",
            description=tagline or DEFAULT_DESCRIPTION,
            theme=Theme.from_cafe(cafe),
        ),
        header=HeaderSection(
            name=name,
            tagline=tagline,
            logo_url=trusted_url(logo) if logo else None,
        ),
        contact_bar=build_contact_bar(cafe),
        nav=nav,
        content=content,
        footer=FooterSection(
            name=name,
            address=_text(cafe, "address"),
            socials=build_socials(cafe),
        ),
    )
