"""
Database models for the item catalog.

All SQLAlchemy models are imported here so the schema is complete on create_all.
"""

from catalog.models.category import Category
from catalog.models.item import Item

__all__ = [
    "Category",
    "Item",
]
