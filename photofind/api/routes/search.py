"""Search endpoints - rule-based natural language search with relevance ranking."""

import logging
import math
from typing import List

from fastapi import APIRouter, HTTPException, Query

from photofind import config
from photofind.api.models import NLSearchResponse, Pagination, QueryInfo
from photofind.search.query_parser import get_query_suggestions, parse_natural_language
from photofind.search.ranker import rank_by_relevance
from photofind.storage.sqlite_store import SQLiteStore

router = APIRouter(prefix="/search", tags=["search"])

logger = logging.getLogger(__name__)


@router.get("/nl", response_model=NLSearchResponse)
async def natural_language_search(
    q: str = Query("", description="Free-text search phrase"),
    page: int = Query(1, ge=1),
    limit: int = Query(config.SEARCH_DEFAULT_LIMIT, ge=1, le=config.SEARCH_MAX_LIMIT),
):
    """
    Search images with a natural language phrase.

    1. Parse the phrase into scenes/objects/emotions, keywords, dates, locations
    2. Fetch a page of candidates with a coarse storage filter
    3. Rank the page by relevance and drop non-matching images
    """
    if not q.strip():
        raise HTTPException(status_code=400, detail="Search query cannot be empty")

    try:
        logger.info(f"NL search query: '{q}'")

        parsed = parse_natural_language(q)
        logger.info(
            f"Parsed: scenes={parsed.scenes} objects={parsed.objects} "
            f"emotions={parsed.emotions} dates={parsed.dates} "
            f"keywords={parsed.keywords} confidence={parsed.confidence:.2f}"
        )

        store = SQLiteStore()
        candidates, total = store.search_candidates(parsed, page=page, limit=limit)
        ranked = rank_by_relevance(candidates, parsed)

        logger.info(f"Found {total} images, returning top {len(ranked)}")

        return NLSearchResponse(
            images=ranked,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit),
            ),
            query=QueryInfo(
                original=q,
                parsed=parsed.model_dump(mode="json", exclude_none=True),
            ),
        )
    except Exception as e:
        logger.error(f"NL search error: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/suggestions", response_model=List[str])
async def search_suggestions():
    """Example phrases for the search box."""
    return get_query_suggestions()
