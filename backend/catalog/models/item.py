"""
Item database model.
"""

from sqlalchemy import Column, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship

from catalog.database import Base


class Item(Base):
    """Catalog item referencing one category and one stored image."""

    __tablename__ = "items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    image_name = Column(Text, nullable=False)  # <hex-sha256>.jpg in the image store

    # Relationships
    category = relationship("Category", back_populates="items")
