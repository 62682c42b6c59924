"""
Rendering of standalone menu pages.

Covers:
  - determinism
  - escaping of user text (exactly once)
  - empty menu / empty category states
  - badge order, price formatting, default theme
  - contact bar and social link omission
  - the Café Verde end-to-end scenario
"""
import pytest

from qrmenu.services.menu_renderer import MenuRenderError, escape_html, format_money, render, write_menu_file
from qrmenu.services.menu_renderer.sections import BADGES, Theme, build_page

VERDE = {"name": "Café Verde", "slug": "cafe-verde", "logo": None}
DRINKS = {"name": "Drinks", "icon": "☕", "items": [{"name": "Latte", "price": 4, "is_vegan": True}]}


def _cafe(**overrides):
    return {**VERDE, **overrides}


class TestEscaping:
    def test_escape_html_mapping(self):
        assert escape_html("<a href=\"x\">Tom & 'Jerry'</a>") == (
            "&lt;a href=&quot;x&quot;&gt;Tom &amp; &#039;Jerry&#039;&lt;/a&gt;"
        )

    def test_escape_html_none_is_empty(self):
        assert escape_html(None) == ""

    def test_escape_html_non_string(self):
        assert escape_html(42) == "42"

    def test_script_in_name_is_escaped(self):
        html = render(_cafe(name="<script>alert(1)</script>"), [])
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        # only the page's own script block
        assert html.count("<script>") == 1

    def test_ampersand_escaped_once(self):
        html = render(_cafe(name="Tom & Jerry's"), [])
        assert '<h1 class="cafe-name">Tom &amp; Jerry&#039;s</h1>' in html
        assert "&amp;amp;" not in html

    def test_item_fields_escaped(self):
        category = {"name": "<i>Snacks</i>", "icon": "<b>", "items": [
            {"name": "Fish & Chips", "description": "<em>crispy</em>", "price": 5},
        ]}
        html = render(_cafe(), [category])
        assert "&lt;i&gt;Snacks&lt;/i&gt;" in html
        assert "&lt;b&gt;" in html
        assert '<div class="item-name">Fish &amp; Chips</div>' in html
        assert "&lt;em&gt;crispy&lt;/em&gt;" in html
        assert "<em>" not in html


class TestDeterminism:
    def test_same_input_same_output(self):
        assert render(VERDE, [DRINKS]) == render(VERDE, [DRINKS])

    def test_input_not_mutated(self):
        category = {"name": "Drinks", "items": [{"name": "Tea", "price": "2"}]}
        render(VERDE, [category])
        assert category == {"name": "Drinks", "items": [{"name": "Tea", "price": "2"}]}


class TestEmptyStates:
    def test_no_categories_shows_coming_soon(self):
        html = render(VERDE, [])
        assert "Menu Coming Soon" in html
        assert "<nav" not in html
        assert 'class="category-btn' not in html

    def test_none_categories_treated_as_empty(self):
        assert "Menu Coming Soon" in render(VERDE, None)

    def test_category_without_items(self):
        html = render(VERDE, [{"id": 7, "name": "Desserts", "items": []}])
        assert "No items in this category yet." in html
        assert 'data-category="7">Desserts</button>' in html
        assert "Menu Coming Soon" not in html

    def test_category_id_falls_back_to_position(self):
        html = render(VERDE, [{"name": "A"}, {"name": "B"}])
        assert 'id="category-1"' in html
        assert 'id="category-2"' in html


class TestBadges:
    def test_badges_follow_fixed_order(self):
        item = {"name": "Bowl", "price": 9, "is_vegan": True, "is_new": True, "is_bestseller": True}
        html = render(VERDE, [{"name": "Mains", "items": [item]}])
        best = html.index("⭐ Bestseller")
        new = html.index("🆕 New")
        vegan = html.index("🌱 Vegan")
        assert best < new < vegan

    def test_gluten_free_label(self):
        html = render(VERDE, [{"name": "Mains", "items": [{"name": "Rice", "is_gluten_free": 1}]}])
        assert '<span class="badge badge-gf">GF</span>' in html

    def test_falsey_flags_render_no_badges(self):
        item = {"name": "Rice", "is_vegan": 0, "is_spicy": "0", "is_new": None}
        html = render(VERDE, [{"name": "Mains", "items": [item]}])
        assert 'class="item-badges"' not in html

    def test_badge_table_order(self):
        assert [flag for flag, _ in BADGES] == [
            "is_bestseller", "is_new", "is_vegan", "is_vegetarian", "is_spicy", "is_gluten_free",
        ]


class TestPrices:
    def test_price_two_decimals(self):
        html = render(_cafe(currency="$"), [{"name": "Drinks", "items": [{"name": "Tea", "price": 3.5}]}])
        assert "$3.50" in html

    def test_original_price_struck_through(self):
        item = {"name": "Tea", "price": 3, "original_price": 5}
        html = render(_cafe(currency="$"), [{"name": "Drinks", "items": [item]}])
        assert "$3.00" in html
        assert '<span class="original-price">$5.00</span>' in html
        assert "line-through" in html

    def test_default_currency(self):
        assert format_money("₹", 4) == "₹4.00"
        html = render(VERDE, [DRINKS])
        assert "₹4.00" in html

    @pytest.mark.parametrize("value", [None, "abc", float("nan"), True, 10 ** 400])
    def test_malformed_price_renders_zero(self, value):
        assert format_money("$", value) == "$0.00"

    def test_numeric_string_price(self):
        assert format_money("$", "2.5") == "$2.50"

    def test_oversized_numbers_degrade(self):
        item = {"name": "Tea", "price": 10 ** 400, "original_price": 10 ** 400, "calories": 10 ** 400}
        html = render(_cafe(currency="$"), [{"name": "Drinks", "items": [item]}])
        assert "$0.00" in html
        assert '<span class="original-price">' not in html
        assert " cal</p>" not in html


class TestNavigation:
    @pytest.fixture
    def html(self):
        return render(VERDE, [
            {"id": 3, "name": "Drinks", "items": []},
            {"id": 8, "name": "Food", "items": []},
        ])

    def test_only_first_button_active(self, html):
        assert '<button class="category-btn active" data-category="3">' in html
        assert '<button class="category-btn" data-category="8">' in html
        assert html.count("category-btn active") == 1

    @pytest.mark.parametrize("category_id", ["3", "8"])
    def test_buttons_target_sections(self, html, category_id):
        assert f'data-category="{category_id}">' in html
        assert f'id="category-{category_id}" data-category="{category_id}"' in html

    def test_scroll_tracking_script(self, html):
        script = html[html.index("<script>"):]
        assert "IntersectionObserver" in script
        assert "threshold: 0.3" in script
        assert "scrollIntoView" in script


class TestTheme:
    def test_default_theme_literals(self):
        html = render(VERDE, [])
        for prop, value in (
            ("--primary", "#D4A574"),
            ("--secondary", "#8B7355"),
            ("--accent", "#F5E6D3"),
            ("--background", "#FAF7F2"),
            ("--text", "#4A4A4A"),
        ):
            assert f"{prop}: {value};" in html

    def test_blank_color_falls_back(self):
        theme = Theme.from_cafe({"primary_color": "  ", "text_color": "#111111"})
        assert theme.primary == "#D4A574"
        assert theme.text == "#111111"

    def test_custom_colors_used(self):
        html = render(_cafe(primary_color="#2C5F2D"), [])
        assert "--primary: #2C5F2D;" in html


class TestHeaderAndFooter:
    def test_title_and_default_description(self):
        html = render(VERDE, [])
        assert "<title>Café Verde - Menu</title>" in html
        assert 'content="View our delicious menu"' in html

    def test_tagline_used_as_description(self):
        html = render(_cafe(tagline="Fresh & green"), [])
        assert 'content="Fresh &amp; green"' in html
        assert '<p class="tagline">Fresh &amp; green</p>' in html

    def test_logo_image(self):
        html = render(_cafe(logo="/uploads/logos/a.png"), [])
        assert '<img src="/uploads/logos/a.png" alt="Café Verde" class="logo">' in html
        assert "logo-placeholder" not in html.split("<body>")[1]

    def test_contact_bar_omitted_without_contacts(self):
        assert 'class="contact-bar"' not in render(VERDE, [])

    def test_contact_bar_links(self):
        html = render(_cafe(phone="+91 98765", email="hi@verde.cafe", website="https://verde.cafe"), [])
        assert 'href="tel:+91 98765"' in html
        assert 'href="mailto:hi@verde.cafe"' in html
        assert "Email Us" in html
        assert 'href="https://verde.cafe" target="_blank"' in html

    def test_socials(self):
        html = render(_cafe(instagram="verde", facebook="cafeverde"), [])
        assert 'href="https://instagram.com/verde"' in html
        assert 'href="https://facebook.com/cafeverde"' in html

    def test_socials_omitted(self):
        assert 'class="social-links"' not in render(VERDE, [])

    def test_footer(self):
        html = render(_cafe(address="12 Lake Rd"), [])
        assert '<p class="footer-address">12 Lake Rd</p>' in html
        assert "Powered by QR Menu System" in html


class TestRequiredFields:
    @pytest.mark.parametrize("cafe", [{"slug": "x"}, {"name": "X"}, {"name": "  ", "slug": "x"}, None])
    def test_missing_name_or_slug(self, cafe):
        with pytest.raises(MenuRenderError):
            render(cafe, [])

    def test_render_error_is_value_error(self):
        with pytest.raises(ValueError):
            build_page({}, [])


class TestCafeVerdeScenario:
    @pytest.fixture
    def html(self):
        return render(VERDE, [DRINKS])

    def test_logo_placeholder(self, html):
        assert '<div class="logo-placeholder">☕</div>' in html
        assert 'class="logo"' not in html

    def test_single_nav_button(self, html):
        assert html.count('class="category-btn') == 1
        assert ">☕ Drinks</button>" in html

    def test_single_item_card(self, html):
        assert html.count('<div class="menu-item">') == 1
        assert '<div class="item-name">Latte</div>' in html

    def test_single_vegan_badge(self, html):
        assert html.count('<span class="badge ') == 1
        assert '<span class="badge badge-vegan">🌱 Vegan</span>' in html

    def test_price(self, html):
        price = html.split('<div class="item-price">')[1].split("</div>")[0].strip()
        assert price.endswith("4.00")


class TestWriteMenuFile:
    def test_writes_index_and_images_dir(self, tmp_path):
        path = write_menu_file("<html></html>", tmp_path, "cafe-verde")
        assert path == tmp_path / "cafe-verde" / "index.html"
        assert path.read_text(encoding="utf-8") == "<html></html>"
        assert (tmp_path / "cafe-verde" / "images").is_dir()
