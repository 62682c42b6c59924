from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from qrmenu.models.base import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    cafe_id = Column(Integer, ForeignKey("cafes.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    icon = Column(String, server_default="🍽️")
    description = Column(Text, nullable=True)
    sort_order = Column(Integer, nullable=False, server_default="0")
    is_active = Column(Integer, nullable=False, server_default="1")
    created_at = Column(DateTime, server_default=func.now())
