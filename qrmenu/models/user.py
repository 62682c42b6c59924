from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from qrmenu.models.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String, unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # password hash
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, server_default="owner")  # "admin", "owner"
    cafe_id = Column(Integer, ForeignKey("cafes.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Integer, nullable=False, server_default="1")
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())
