from qrmenu.core.constants import DEFAULT_CATEGORY_ICON

SAMPLE_MENU = (
    {
        "name": "Hot Drinks",
        "icon": "☕",
        "items": (
            {"name": "Espresso", "description": "Rich and bold", "price": 3.50},
            {"name": "Cappuccino", "description": "With steamed milk foam", "price": 4.50},
            {"name": "Latte", "description": "Smooth and creamy", "price": 4.50},
        ),
    },
    {
        "name": "Cold Drinks",
        "icon": "🧊",
        "items": (
            {"name": "Iced Coffee", "description": "Refreshing cold brew", "price": 4.00},
            {"name": "Iced Latte", "description": "Cold and creamy", "price": 5.00},
        ),
    },
    {
        "name": "Pastries",
        "icon": "🥐",
        "items": (
            {"name": "Croissant", "description": "Buttery and flaky", "price": 3.00},
            {"name": "Muffin", "description": "Fresh baked daily", "price": 3.50},
        ),
    },
)

# First match wins
_ICON_KEYWORDS = (
    (("coffee", "hot", "beverage"), "☕"),
    (("cold", "ice", "frappe"), "🧊"),
    (("tea",), "🍵"),
    (("pastry", "bakery", "dessert"), "🥐"),
    (("breakfast", "brunch"), "🍳"),
    (("sandwich", "lunch"), "🥪"),
    (("salad",), "🥗"),
    (("soup",), "🍲"),
    (("pizza",), "🍕"),
    (("burger",), "🍔"),
)


def category_icon(category_name: str) -> str:
    name = (category_name or "").lower()
    for keywords, icon in _ICON_KEYWORDS:
        if any(keyword in name for keyword in keywords):
            return icon
    return DEFAULT_CATEGORY_ICON


def sample_menu() -> list:
    """A fresh, mutable copy of the sample menu."""
    return [
        {**category, "items": [dict(item) for item in category["items"]]}
        for category in SAMPLE_MENU
    ]
