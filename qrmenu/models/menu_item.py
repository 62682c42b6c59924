from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, func
from qrmenu.models.base import Base


class MenuItem(Base):
    __tablename__ = "menu_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cafe_id = Column(Integer, ForeignKey("cafes.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Float, nullable=True)
    original_price = Column(Float, nullable=True)
    image = Column(String, nullable=True)
    calories = Column(Integer, nullable=True)

    # Dietary / promotional tags
    is_vegan = Column(Integer, nullable=False, server_default="0")
    is_vegetarian = Column(Integer, nullable=False, server_default="0")
    is_gluten_free = Column(Integer, nullable=False, server_default="0")
    is_spicy = Column(Integer, nullable=False, server_default="0")
    is_bestseller = Column(Integer, nullable=False, server_default="0")
    is_popular = Column(Integer, nullable=False, server_default="0")
    is_new = Column(Integer, nullable=False, server_default="0")

    is_available = Column(Integer, nullable=False, server_default="1")
    sort_order = Column(Integer, nullable=False, server_default="0")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())
