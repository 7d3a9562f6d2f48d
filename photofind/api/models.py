"""Pydantic models for API requests/responses."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from photofind.search.models import AILabels, CandidateRecord, RankedRecord


class ImageCreateRequest(BaseModel):
    """Request to register an image and its extracted metadata."""

    name: str = Field(..., min_length=1)
    title: Optional[str] = None
    description: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    is_favorite: bool = False
    ai_labels: Optional[AILabels] = None
    ai_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)
    taken_at: Optional[datetime] = None
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class ImageResponse(CandidateRecord):
    """Image metadata response."""


class TagRequest(BaseModel):
    """Request to add a tag."""

    tag: str
    type: str = "CUSTOM"


class TagResponse(BaseModel):
    """Tag attached to an image."""

    id: int
    name: str
    type: str


class TagSummary(BaseModel):
    """Tag with image count."""

    id: int
    name: str
    type: str
    image_count: int


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class QueryInfo(BaseModel):
    """The raw query and its structured form (absent fields omitted)."""

    original: str
    parsed: Dict[str, Any]


class NLSearchResponse(BaseModel):
    """Natural language search response."""

    images: List[RankedRecord]
    pagination: Pagination
    query: QueryInfo
