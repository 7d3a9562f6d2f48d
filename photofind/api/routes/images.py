"""Image-related endpoints."""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from photofind.api.models import ImageCreateRequest, ImageResponse
from photofind.storage.sqlite_store import SQLiteStore

router = APIRouter(prefix="/images", tags=["images"])

logger = logging.getLogger(__name__)


@router.get("", response_model=List[ImageResponse])
async def list_images():
    """Get all images, newest first."""
    store = SQLiteStore()
    try:
        return [record.model_dump() for record in store.get_all_images()]
    except Exception as e:
        logger.error(f"Failed to list images: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("", response_model=ImageResponse, status_code=201)
async def create_image(request: ImageCreateRequest):
    """Register an image with its metadata and AI labels."""
    store = SQLiteStore()
    try:
        fields = request.model_dump()
        if request.ai_labels is not None:
            fields["ai_labels"] = request.ai_labels.model_dump(exclude_none=True)
        image_id = store.add_image(**fields)
        logger.info(f"Added image {image_id}: {request.name}")
        return store.get_image(image_id).model_dump()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to add image: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/{image_id}", response_model=ImageResponse)
async def get_image(image_id: int):
    """Get a specific image."""
    store = SQLiteStore()
    try:
        image = store.get_image(image_id)
        if not image:
            raise HTTPException(status_code=404, detail="Image not found")
        return image.model_dump()
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.delete("/{image_id}")
async def delete_image(image_id: int):
    """Move an image to the trash."""
    store = SQLiteStore()
    try:
        if not store.soft_delete_image(image_id):
            raise HTTPException(status_code=404, detail="Image not found")
        logger.info(f"Moved image {image_id} to trash")
        return {"status": "success", "image_id": image_id}
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
