"""
Category database model.
"""

from sqlalchemy import Column, Integer, Text
from sqlalchemy.orm import relationship

from catalog.database import Base


class Category(Base):
    """Category model; rows are created lazily the first time an item names them."""

    __tablename__ = "categories"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False, unique=True)

    # Relationships
    items = relationship("Item", back_populates="category")
