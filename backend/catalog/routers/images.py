"""
API endpoint serving stored images, with a default image fallback.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from catalog.config import Settings
from catalog.dependencies import get_image_store, get_settings
from catalog.services.images import ImageStore

logger = logging.getLogger(__name__)

router = APIRouter()

IMAGE_SUFFIXES = (".jpg", ".jpeg")


@router.get("/images/{filename}")
def get_image(
    filename: str,
    images: ImageStore = Depends(get_image_store),
    config: Settings = Depends(get_settings),
):
    """
    Return an image by filename.

    Unknown images are answered with the default image instead of an error.
    """
    try:
        images.path_for(filename)
    except ValueError:
        logger.warning(f"Rejected image path: {filename}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="invalid image path")

    if not filename.lower().endswith(IMAGE_SUFFIXES):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="image path does not end with .jpg or .jpeg",
        )

    if not images.exists(filename):
        logger.debug(f"Image not found, serving default: {filename}")
        filename = config.DEFAULT_IMAGE

    # ImageNotFound, e.g. for a missing default image, propagates to the 404 handler
    data = images.retrieve(filename)

    logger.info(f"Returned image {filename}")
    return Response(content=data, media_type="image/jpeg")
