"""
Rule-based natural language query parser.

Turns a free-text search phrase such as "sunset photos from last month at the
Beach" into a StructuredQuery: categorized scene/object/emotion terms, fallback
keywords, a resolved date range, location hints and a heuristic confidence.
Everything is dictionary driven; there is no model and no fuzzy matching.
"""

import calendar
import logging
import re
from datetime import datetime, timedelta
from typing import Dict, FrozenSet, List, Optional

from photofind import config
from photofind.search.models import DateRange, StructuredQuery

logger = logging.getLogger(__name__)

# ==============================================================================
# STATIC TABLES
# ==============================================================================

STOP_WORDS: FrozenSet[str] = frozenset({
    "find", "show", "get", "search", "me", "my", "the", "a", "an", "of", "in",
    "at", "on", "for", "with", "from", "to", "by", "and", "or", "is", "are",
    "was", "were", "been", "have", "has", "had", "do", "does", "did",
    "photos", "photo", "pictures", "picture", "images", "image", "pics", "pic",
})

SCENE_KEYWORDS: FrozenSet[str] = frozenset({
    "beach", "sea", "ocean", "seaside", "coast", "shore",
    "mountain", "mountains", "hill", "hills", "peak",
    "city", "urban", "downtown", "street", "cityscape",
    "park", "garden", "outdoor", "outside",
    "indoor", "inside", "interior", "room",
    "forest", "woods", "trees", "jungle",
    "sunset", "sunrise", "dawn", "dusk", "twilight",
    "night", "evening", "nighttime",
    "sky", "clouds", "cloudy", "sunny",
    "snow", "winter", "snowy",
    "desert", "sand", "dunes",
    "lake", "river", "water", "waterfall",
    "building", "architecture",
    "landscape", "nature", "scenery",
})

OBJECT_KEYWORDS: FrozenSet[str] = frozenset({
    "person", "people", "human", "man", "woman", "child", "kid", "baby",
    "dog", "cat", "animal", "pet", "bird", "horse",
    "car", "vehicle", "bike", "bicycle", "motorcycle",
    "tree", "flower", "plant", "rose", "leaf",
    "food", "meal", "dish", "cake", "dessert",
    "building", "house", "home", "bridge",
    "boat", "ship", "plane", "airplane",
    "phone", "camera", "computer", "laptop",
    "book", "chair", "table", "furniture",
})

EMOTION_KEYWORDS: FrozenSet[str] = frozenset({
    "happy", "joy", "joyful", "cheerful", "glad",
    "sad", "unhappy", "depressed", "gloomy",
    "peaceful", "calm", "serene", "tranquil", "quiet",
    "tense", "nervous", "anxious", "stressed",
    "energetic", "active", "lively", "dynamic",
    "romantic", "love", "lovely",
    "mysterious", "dark", "moody",
    "excited", "exciting", "thrilling",
    "relaxed", "relaxing", "chill",
})

# Many-to-one: variant -> canonical term
SYNONYMS: Dict[str, str] = {
    # Scenes
    "seaside": "beach",
    "coast": "beach",
    "shore": "beach",
    "sea": "ocean",
    "woods": "forest",
    "hill": "mountain",
    "peak": "mountain",
    "downtown": "city",
    "urban": "city",
    "cityscape": "city",
    "outside": "outdoor",
    "inside": "indoor",
    "interior": "indoor",
    "dawn": "sunrise",
    "dusk": "sunset",
    "twilight": "sunset",
    "nighttime": "night",
    "snowy": "snow",
    "cloudy": "clouds",
    "sunny": "sky",
    # Objects
    "human": "person",
    "man": "person",
    "woman": "person",
    "kid": "child",
    "baby": "child",
    "pet": "animal",
    "bike": "bicycle",
    "plane": "airplane",
    "home": "house",
    "meal": "food",
    "dish": "food",
    "dessert": "food",
    # Emotions
    "joy": "happy",
    "joyful": "happy",
    "cheerful": "happy",
    "glad": "happy",
    "unhappy": "sad",
    "gloomy": "sad",
    "calm": "peaceful",
    "serene": "peaceful",
    "tranquil": "peaceful",
    "quiet": "peaceful",
    "nervous": "tense",
    "anxious": "tense",
    "stressed": "tense",
    "active": "energetic",
    "lively": "energetic",
    "dynamic": "energetic",
    "love": "romantic",
    "lovely": "romantic",
    "dark": "mysterious",
    "moody": "mysterious",
    "exciting": "excited",
    "thrilling": "excited",
    "relaxing": "relaxed",
    "chill": "relaxed",
}

# Month name / abbreviation -> month number (1-12)
MONTHS: Dict[str, int] = {
    "january": 1, "jan": 1,
    "february": 2, "feb": 2,
    "march": 3, "mar": 3,
    "april": 4, "apr": 4,
    "may": 5,
    "june": 6, "jun": 6,
    "july": 7, "jul": 7,
    "august": 8, "aug": 8,
    "september": 9, "sep": 9, "sept": 9,
    "october": 10, "oct": 10,
    "november": 11, "nov": 11,
    "december": 12, "dec": 12,
}

QUERY_SUGGESTIONS = (
    "beach photos",
    "sunset pictures",
    "photos with people",
    "mountain landscapes",
    "city photos at night",
    "photos from last month",
    "peaceful nature images",
    "happy moments",
    "food pictures",
    "photos with animals",
)

YEAR_PATTERN = re.compile(r"\b(from\s+)?(\d{4})\b", re.ASCII)
MONTH_PATTERN = re.compile(
    r"\b(?:in|from)\s+(" + "|".join(MONTHS) + r")\b",
    re.IGNORECASE,
)
# Prepositions stay lowercase; the place itself must be capitalized
LOCATION_PATTERN = re.compile(r"\b(?:at|in|from)\s+([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)")
PUNCTUATION_PATTERN = re.compile(r"[^\w\s]")


# ==============================================================================
# DATE EXTRACTION
# ==============================================================================

def _end_of_day(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, 23, 59, 59)


def _shift_months(moment: datetime, months: int) -> datetime:
    """Move by whole calendar months, clamping the day to the target month."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _year_range(query: str) -> Optional[DateRange]:
    match = YEAR_PATTERN.search(query)
    if not match:
        return None
    year = int(match.group(2))
    try:
        return DateRange(start=datetime(year, 1, 1), end=_end_of_day(year, 12, 31))
    except ValueError:
        # Year 0000 and friends
        return None


def _month_range(query: str, now: datetime) -> Optional[DateRange]:
    match = MONTH_PATTERN.search(query)
    if not match:
        return None
    month = MONTHS[match.group(1).lower()]
    last_day = calendar.monthrange(now.year, month)[1]
    return DateRange(
        start=datetime(now.year, month, 1),
        end=_end_of_day(now.year, month, last_day),
    )


def _relative_range(query: str, now: datetime) -> Optional[DateRange]:
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)

    # Checked in order, first phrase found wins
    if "last week" in query:
        start = now - timedelta(days=7)
    elif "last month" in query:
        start = _shift_months(now, -1)
    elif "last year" in query:
        start = _shift_months(now, -12)
    elif "this week" in query:
        # Weeks start on Sunday
        start = now - timedelta(days=(now.weekday() + 1) % 7)
    elif "this month" in query:
        start = midnight.replace(day=1)
    elif "this year" in query:
        start = midnight.replace(month=1, day=1)
    elif "today" in query:
        start = midnight
    else:
        return None

    return DateRange(start=start, end=now)


def extract_dates(query: str, now: Optional[datetime] = None) -> Optional[DateRange]:
    """
    Resolve a date range from a lowercased query.

    Priority: explicit year, then "in/from <month>", then relative phrases.
    Only the first strategy that matches is applied.
    """
    now = now or datetime.now()
    return (
        _year_range(query)
        or _month_range(query, now)
        or _relative_range(query, now)
    )


# ==============================================================================
# LOCATIONS & TOKENS
# ==============================================================================

def extract_locations(query: str) -> List[str]:
    """Capitalized phrases following at/in/from, in order, duplicates kept."""
    return [match.group(1) for match in LOCATION_PATTERN.finditer(query)]


def tokenize(query: str) -> List[str]:
    """Split a lowercased query into tokens, dropping punctuation and stop words."""
    cleaned = PUNCTUATION_PATTERN.sub(" ", query)
    return [token for token in cleaned.split() if token and token not in STOP_WORDS]


def normalize_token(token: str) -> str:
    return SYNONYMS.get(token, token)


def calculate_confidence(result: StructuredQuery) -> float:
    """Heuristic confidence in [0, CONFIDENCE_MAX]."""
    score = config.CONFIDENCE_BASE

    categorized_count = (
        len(result.scenes or [])
        + len(result.objects or [])
        + len(result.emotions or [])
    )
    score += categorized_count * config.CONFIDENCE_PER_CATEGORY_TERM

    if result.dates:
        score += config.CONFIDENCE_DATE_BONUS

    if result.locations:
        score += config.CONFIDENCE_LOCATION_BONUS

    score += min(len(result.keywords) * config.CONFIDENCE_PER_KEYWORD, config.CONFIDENCE_KEYWORD_CAP)

    return min(score, config.CONFIDENCE_MAX)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def parse_natural_language(query: Optional[str], now: Optional[datetime] = None) -> StructuredQuery:
    """
    Parse a natural language query into structured search criteria.

    Args:
        query: Raw search phrase as typed by the user
        now: Reference time for relative dates (defaults to the local clock)

    Returns:
        StructuredQuery with empty optional collections set to None
    """
    if not query or not query.strip():
        return StructuredQuery(keywords=[], confidence=0.0)

    normalized_query = query.lower().strip()

    scenes: List[str] = []
    objects: List[str] = []
    emotions: List[str] = []
    keywords: List[str] = []

    dates = extract_dates(normalized_query, now)
    # Capitalization is the only hint for proper nouns, so use the raw query
    locations = extract_locations(query)

    for token in tokenize(normalized_query):
        term = normalize_token(token)
        categorized = False

        # Independent lookups: a term can belong to several dictionaries
        if term in SCENE_KEYWORDS:
            categorized = True
            if term not in scenes:
                scenes.append(term)
        if term in OBJECT_KEYWORDS:
            categorized = True
            if term not in objects:
                objects.append(term)
        if term in EMOTION_KEYWORDS:
            categorized = True
            if term not in emotions:
                emotions.append(term)

        if not categorized and token not in keywords:
            keywords.append(token)

    result = StructuredQuery(
        keywords=keywords,
        scenes=scenes or None,
        objects=objects or None,
        emotions=emotions or None,
        dates=dates,
        locations=locations or None,
    )
    result.confidence = calculate_confidence(result)

    logger.debug(f"Parsed query '{query}': {result.model_dump(exclude_none=True)}")
    return result


def get_query_suggestions() -> List[str]:
    """Example phrases for search box placeholders and autocomplete."""
    return list(QUERY_SUGGESTIONS)
