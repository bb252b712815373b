"""
Shared API dependencies.
"""

from fastapi import Request

from catalog.config import Settings
from catalog.services.catalog_service import CatalogService
from catalog.services.images import ImageStore


def get_catalog_service(request: Request) -> CatalogService:
    """Catalog service built at startup and kept on the application state."""
    return request.app.state.catalog


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.catalog.images


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
