from typing import List
from pydantic import BaseModel, Field


# --- Item ---
class NewItem(BaseModel):
    """Row to insert; the category has already been resolved to an id."""
    name: str = Field(..., min_length=1)
    category_id: int
    image_name: str = Field(..., min_length=1)


class Item(BaseModel):
    """Item as read back, with the category name joined in."""
    id: int
    name: str
    category: str
    image_name: str

    class Config:
        from_attributes = True


class ItemListResponse(BaseModel):
    items: List[Item]


class AddItemResponse(BaseModel):
    message: str
    item: Item


# --- Misc ---
class HelloResponse(BaseModel):
    message: str
