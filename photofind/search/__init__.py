"""Natural language query parsing and relevance ranking."""

from photofind.search.query_parser import get_query_suggestions, parse_natural_language
from photofind.search.ranker import rank_by_relevance

__all__ = ["get_query_suggestions", "parse_natural_language", "rank_by_relevance"]
