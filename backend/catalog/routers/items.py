"""
API endpoints for adding, listing, fetching and searching items.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from catalog.config import Settings
from catalog.dependencies import get_catalog_service, get_settings
from catalog.schemas import AddItemResponse, Item, ItemListResponse
from catalog.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/items", response_model=AddItemResponse)
def add_item(
    name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    catalog: CatalogService = Depends(get_catalog_service),
    config: Settings = Depends(get_settings),
):
    """Add a new item from a multipart form with name, category and image."""
    if not name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="name is required")
    if not category:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="category is required")
    if image is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="image is required")

    image_data = image.file.read(config.MAX_UPLOAD_SIZE + 1)
    if not image_data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="image is required")
    if len(image_data) > config.MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Image too large. Max size: {config.MAX_UPLOAD_SIZE / 1024 / 1024} MB",
        )

    item = catalog.add_item(name, category, image_data, timeout=config.REQUEST_TIMEOUT)
    message = f"item received: {item.name}"
    logger.info(message)

    return AddItemResponse(message=message, item=item)


@router.get("/items", response_model=ItemListResponse)
def list_items(
    catalog: CatalogService = Depends(get_catalog_service),
    config: Settings = Depends(get_settings),
):
    """List every registered item."""
    return ItemListResponse(items=catalog.get_all(timeout=config.REQUEST_TIMEOUT))


@router.get("/items/{item_id}", response_model=Item)
def get_item(
    item_id: str,
    catalog: CatalogService = Depends(get_catalog_service),
    config: Settings = Depends(get_settings),
):
    """Return a single item by id."""
    # Plain ASCII digits only; int() alone would also take "1_000" or " 7 "
    if not (item_id.isascii() and item_id.isdigit()) or int(item_id) < 1:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid item ID")

    return catalog.get_by_id(int(item_id), timeout=config.REQUEST_TIMEOUT)


@router.get("/search", response_model=ItemListResponse)
def search_items(
    keyword: Optional[str] = None,
    catalog: CatalogService = Depends(get_catalog_service),
    config: Settings = Depends(get_settings),
):
    """Items whose name contains the keyword (case-insensitive)."""
    if not keyword:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="keyword is required")

    return ItemListResponse(
        items=catalog.search_by_keyword(keyword, timeout=config.REQUEST_TIMEOUT)
    )
