"""Relevance ranking of candidate images against a parsed query."""

from typing import Iterable, List, Optional, Sequence

from photofind import config
from photofind.search.models import CandidateRecord, RankedRecord, StructuredQuery

WEIGHTS = config.RELEVANCE_WEIGHTS


def count_matches(values: Optional[Iterable[str]], terms: Optional[Iterable[str]]) -> int:
    """Number of distinct terms present in values, compared case-insensitively."""
    value_set = {value.lower() for value in values or []}
    term_set = {term.lower() for term in terms or []}
    return len(value_set & term_set)


def _ai_label_score(record: CandidateRecord, parsed: StructuredQuery) -> float:
    labels = record.ai_labels
    if labels is None:
        return 0.0

    score = 0.0
    if parsed.scenes:
        score += count_matches(labels.scenes, parsed.scenes) * WEIGHTS["scene"]
    if parsed.objects:
        score += count_matches(labels.objects, parsed.objects) * WEIGHTS["object"]
    if parsed.emotions:
        score += count_matches(labels.emotions, parsed.emotions) * WEIGHTS["emotion"]

    # A missing or zero confidence leaves the label score unscaled
    if record.ai_confidence:
        score *= record.ai_confidence
    return score


def _text_score(record: CandidateRecord, keywords: Sequence[str]) -> float:
    fields = [
        (record.name or "").lower(),
        (record.title or "").lower(),
        (record.description or "").lower(),
    ]
    score = 0.0
    for keyword in keywords:
        keyword_lower = keyword.lower()
        for field in fields:
            if keyword_lower in field:
                score += WEIGHTS["text_field"]
    return score


def score_record(record: CandidateRecord, parsed: StructuredQuery) -> float:
    """
    Relevance of a single record.

    AI label overlap (scaled by the analysis confidence), tag overlap with
    every query term, keyword hits in name/title/description and a small
    bonus for falling inside the query's date range.
    """
    score = _ai_label_score(record, parsed)
    score += count_matches(record.tag_names, parsed.search_terms()) * WEIGHTS["tag"]
    score += _text_score(record, parsed.keywords)

    if parsed.dates and record.taken_at and parsed.dates.contains(record.taken_at):
        score += WEIGHTS["date"]

    return score


def rank_by_relevance(
    records: Iterable[CandidateRecord],
    parsed: StructuredQuery,
) -> List[RankedRecord]:
    """
    Score every record, drop the irrelevant ones and sort best first.

    Records scoring zero or less are removed. Ties keep their input order.
    """
    ranked = []
    for record in records:
        score = score_record(record, parsed)
        if score <= 0:
            continue
        ranked.append(RankedRecord(**record.model_dump(), relevance_score=score))

    # list.sort is stable
    ranked.sort(key=lambda item: item.relevance_score, reverse=True)
    return ranked
