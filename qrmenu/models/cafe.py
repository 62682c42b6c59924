from sqlalchemy import Column, Integer, String, Text, DateTime, func
from qrmenu.models.base import Base


class Cafe(Base):
    __tablename__ = "cafes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    tagline = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    logo = Column(String, nullable=True)
    cover_image = Column(String, nullable=True)

    # Contact
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    address = Column(Text, nullable=True)
    website = Column(String, nullable=True)
    google_link = Column(String, nullable=True)
    instagram = Column(String, nullable=True)
    facebook = Column(String, nullable=True)

    # Presentation
    currency = Column(String, server_default="₹")
    primary_color = Column(String, server_default="#2C5F2D")
    secondary_color = Column(String, server_default="#97BC62")
    accent_color = Column(String, server_default="#DAA520")
    background_color = Column(String, server_default="#FDFBF7")
    text_color = Column(String, server_default="#2D3436")

    # Publication (0/1 flags so raw SQL reads the same on every backend)
    is_published = Column(Integer, nullable=False, server_default="0")
    is_deployed = Column(Integer, nullable=False, server_default="0")
    deployed_url = Column(String, nullable=True)
    qr_code_path = Column(Text, nullable=True)
    last_generated = Column(String, nullable=True)  # ISO-8601 timestamp

    created_by = Column(Integer, nullable=True)  # users.id of the creator
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now())
