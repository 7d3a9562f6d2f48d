"""
Tag endpoints.

Tags come from three places: EXIF extraction (AUTO_EXIF), image analysis
(AUTO_AI) and the user (CUSTOM). All of them take part in search.
"""

import logging
from typing import List

from fastapi import APIRouter, HTTPException

from photofind.api.models import TagRequest, TagResponse, TagSummary
from photofind.storage.sqlite_store import SQLiteStore

router = APIRouter(prefix="/tags", tags=["tags"])

logger = logging.getLogger(__name__)


@router.get("", response_model=List[TagSummary])
async def list_all_tags():
    """Get all tags with image counts."""
    store = SQLiteStore()
    try:
        return store.get_all_tags_with_counts()
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/image/{image_id}", response_model=List[TagResponse])
async def get_image_tags(image_id: int):
    """Get all tags for a specific image."""
    store = SQLiteStore()
    try:
        if not store.get_image(image_id):
            raise HTTPException(status_code=404, detail="Image not found")
        return store.get_tags_for_image(image_id)
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/image/{image_id}")
async def add_tag_to_image(image_id: int, request: TagRequest):
    """Add a single tag to an image."""
    store = SQLiteStore()
    try:
        if not store.get_image(image_id):
            raise HTTPException(status_code=404, detail="Image not found")

        tag_id = store.add_tag_to_image(image_id, request.tag, request.type)
        logger.info(f"Tagged image {image_id} with '{request.tag.strip()}' ({request.type})")
        return {"status": "success", "tag_id": tag_id, "tag": request.tag.strip()}
    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))
