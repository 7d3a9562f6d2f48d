"""Data models shared by the query parser, the ranker and the image store."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def to_local_naive(moment: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are compared as naive local time; aware values are converted."""
    if moment is not None and moment.tzinfo is not None:
        return moment.astimezone().replace(tzinfo=None)
    return moment


class DateRange(BaseModel):
    """Inclusive date range. A missing bound is unbounded on that side."""

    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @field_validator("start", "end")
    @classmethod
    def normalize_bounds(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(value)

    def contains(self, moment: datetime) -> bool:
        moment = to_local_naive(moment)
        if self.start is not None and moment < self.start:
            return False
        if self.end is not None and moment > self.end:
            return False
        return True


class StructuredQuery(BaseModel):
    """
    Structured form of a free-text search phrase.

    Optional collections are either None or non-empty, so serializing with
    ``exclude_none=True`` omits every field the phrase did not produce.
    """

    keywords: List[str] = Field(default_factory=list)
    scenes: Optional[List[str]] = None
    objects: Optional[List[str]] = None
    emotions: Optional[List[str]] = None
    dates: Optional[DateRange] = None
    locations: Optional[List[str]] = None
    confidence: float = 0.0

    def label_terms(self) -> List[str]:
        """Scenes, objects and emotions in that order."""
        return [*(self.scenes or []), *(self.objects or []), *(self.emotions or [])]

    def search_terms(self) -> List[str]:
        """Every categorized term followed by the fallback keywords."""
        return [*self.label_terms(), *self.keywords]


class AILabels(BaseModel):
    """Labels produced by the image analysis service."""

    scenes: Optional[List[str]] = None
    objects: Optional[List[str]] = None
    emotions: Optional[List[str]] = None


class CandidateRecord(BaseModel):
    """An image row handed to the ranker by the storage layer."""

    id: int
    name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    tag_names: List[str] = Field(default_factory=list)
    ai_labels: Optional[AILabels] = None
    ai_confidence: Optional[float] = None
    taken_at: Optional[datetime] = None

    # Storage metadata carried through to API responses
    width: Optional[int] = None
    height: Optional[int] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    is_favorite: bool = False
    city: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[str] = None

    @field_validator("taken_at")
    @classmethod
    def normalize_taken_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_local_naive(value)


class RankedRecord(CandidateRecord):
    """Candidate record with its computed relevance score."""

    relevance_score: float
