"""
Coarse SQL predicate for candidate selection.

The predicate deliberately over-selects: any label, keyword or location hit
is enough to become a candidate. Precision comes from the ranker.
"""

from typing import List, Tuple

from photofind.search.models import StructuredQuery

LABEL_CATEGORIES = ("scenes", "objects", "emotions")


def _label_conditions(labels: List[str]) -> Tuple[List[str], List]:
    conditions: List[str] = []
    params: List = []

    for label in labels:
        for category in LABEL_CATEGORIES:
            conditions.append(
                "EXISTS (SELECT 1 FROM json_each(i.ai_labels, ?) WHERE json_each.value = ?)"
            )
            params.extend([f"$.{category}", label])

    placeholders = ", ".join("?" for _ in labels)
    conditions.append(
        "EXISTS (SELECT 1 FROM image_tags it JOIN tags t ON t.id = it.tag_id "
        f"WHERE it.image_id = i.id AND t.type = 'AUTO_AI' AND t.name IN ({placeholders}))"
    )
    params.extend(labels)
    return conditions, params


def _keyword_conditions(keywords: List[str]) -> Tuple[List[str], List]:
    conditions: List[str] = []
    params: List = []

    for keyword in keywords:
        pattern = f"%{keyword}%"
        conditions.extend([
            "i.name LIKE ?",
            "i.title LIKE ?",
            "i.description LIKE ?",
            "EXISTS (SELECT 1 FROM image_tags it JOIN tags t ON t.id = it.tag_id "
            "WHERE it.image_id = i.id AND t.name LIKE ?)",
        ])
        params.extend([pattern] * 4)
    return conditions, params


def _location_conditions(locations: List[str]) -> Tuple[List[str], List]:
    placeholders = ", ".join("?" for _ in locations)
    conditions = [
        "EXISTS (SELECT 1 FROM image_tags it JOIN tags t ON t.id = it.tag_id "
        f"WHERE it.image_id = i.id AND t.type = 'AUTO_EXIF' AND t.name IN ({placeholders}))"
    ]
    params: List = list(locations)

    for location in locations:
        pattern = f"%{location}%"
        conditions.extend(["i.city LIKE ?", "i.country LIKE ?", "i.state LIKE ?"])
        params.extend([pattern] * 3)
    return conditions, params


def build_where_clause(parsed: StructuredQuery) -> Tuple[str, List]:
    """
    Build a WHERE clause over the ``images`` table aliased as ``i``.

    Returns:
        Tuple of (sql fragment without the WHERE keyword, positional params)
    """
    where = ["i.deleted_at IS NULL"]
    params: List = []

    or_conditions: List[str] = []
    or_params: List = []

    labels = parsed.label_terms()
    if labels:
        conditions, values = _label_conditions(labels)
        or_conditions.extend(conditions)
        or_params.extend(values)

    if parsed.keywords:
        conditions, values = _keyword_conditions(parsed.keywords)
        or_conditions.extend(conditions)
        or_params.extend(values)

    if parsed.locations:
        conditions, values = _location_conditions(parsed.locations)
        or_conditions.extend(conditions)
        or_params.extend(values)

    if or_conditions:
        where.append("(" + " OR ".join(or_conditions) + ")")
        params.extend(or_params)

    if parsed.dates:
        if parsed.dates.start:
            where.append("i.taken_at >= ?")
            params.append(parsed.dates.start.isoformat())
        if parsed.dates.end:
            where.append("i.taken_at <= ?")
            params.append(parsed.dates.end.isoformat())

    return " AND ".join(where), params
