"""Tests for the natural language query parser."""

from datetime import datetime

import pytest

from photofind.search.query_parser import (
    extract_dates,
    extract_locations,
    get_query_suggestions,
    parse_natural_language,
    tokenize,
)

# Sunday afternoon at the end of a leap-year March
NOW = datetime(2024, 3, 31, 15, 30, 45)


@pytest.mark.parametrize("query", ["", "   ", "\t\n", None])
def test_empty_query_returns_zero_confidence(query):
    result = parse_natural_language(query, now=NOW)

    assert result.keywords == []
    assert result.confidence == 0
    assert result.model_dump(exclude_none=True) == {"keywords": [], "confidence": 0.0}


def test_single_scene_term():
    result = parse_natural_language("beach photos", now=NOW)

    assert result.scenes == ["beach"]
    assert result.keywords == []
    assert result.objects is None
    assert result.emotions is None
    assert result.dates is None
    assert result.locations is None
    assert result.confidence == pytest.approx(0.45)


def test_scene_with_explicit_year():
    result = parse_natural_language("sunset pictures from 2023", now=NOW)

    assert "sunset" in result.scenes
    assert result.dates.start == datetime(2023, 1, 1, 0, 0, 0)
    assert result.dates.end == datetime(2023, 12, 31, 23, 59, 59)
    # The year itself is not a stop word, so it stays a fallback keyword
    assert result.keywords == ["2023"]
    assert result.confidence == pytest.approx(0.3 + 0.15 + 0.10 + 0.05)


@pytest.mark.parametrize("query", ["seaside pics", "beach pics", "coast pics", "shore pics"])
def test_synonyms_fold_to_canonical_term(query):
    result = parse_natural_language(query, now=NOW)

    assert result.scenes == ["beach"]
    assert result.keywords == []


def test_parse_is_deterministic():
    query = "Happy dogs at Central Park last month"

    assert parse_natural_language(query, now=NOW) == parse_natural_language(query, now=NOW)


def test_categories_are_filled_independently():
    result = parse_natural_language("joyful kid with a dog in the forest", now=NOW)

    assert result.scenes == ["forest"]
    assert result.objects == ["child", "dog"]
    assert result.emotions == ["happy"]
    assert result.keywords == []


def test_term_in_two_dictionaries_lands_in_both():
    result = parse_natural_language("building", now=NOW)

    assert result.scenes == ["building"]
    assert result.objects == ["building"]
    # Counted once per dictionary
    assert result.confidence == pytest.approx(0.3 + 0.15 * 2)


def test_uncategorized_tokens_become_keywords_in_order():
    result = parse_natural_language("Eiffel tower, eiffel TOWER graduation", now=NOW)

    assert result.keywords == ["eiffel", "tower", "graduation"]
    assert result.scenes is None
    assert result.confidence == pytest.approx(0.3 + 0.15)


def test_duplicate_category_terms_are_collapsed():
    result = parse_natural_language("beach seaside shore beach", now=NOW)

    assert result.scenes == ["beach"]
    assert result.confidence == pytest.approx(0.45)


def test_tokenize_drops_punctuation_and_stop_words():
    assert tokenize("show me the beach!!! photos, at sunset?") == ["beach", "sunset"]


def test_month_name_resolves_to_current_year():
    result = parse_natural_language("snow in december", now=NOW)

    assert result.dates.start == datetime(2024, 12, 1)
    assert result.dates.end == datetime(2024, 12, 31, 23, 59, 59)


def test_month_abbreviation_uses_last_day_of_month():
    dates = extract_dates("from feb", now=NOW)

    assert dates.start == datetime(2024, 2, 1)
    assert dates.end == datetime(2024, 2, 29, 23, 59, 59)


def test_month_needs_preposition():
    assert extract_dates("december snow", now=NOW) is None


def test_year_wins_over_relative_phrase():
    dates = extract_dates("last week 2022", now=NOW)

    assert dates.start == datetime(2022, 1, 1)
    assert dates.end == datetime(2022, 12, 31, 23, 59, 59)


def test_invalid_year_falls_through():
    result = parse_natural_language("beach 0000 today", now=NOW)

    assert result.dates.start == datetime(2024, 3, 31)
    assert result.dates.end == NOW


@pytest.mark.parametrize(
    "query, start",
    [
        ("photos from last week", datetime(2024, 3, 24, 15, 30, 45)),
        ("photos from last month", datetime(2024, 2, 29, 15, 30, 45)),
        ("photos from last year", datetime(2023, 3, 31, 15, 30, 45)),
        ("photos from this month", datetime(2024, 3, 1)),
        ("photos from this year", datetime(2024, 1, 1)),
        ("photos from today", datetime(2024, 3, 31)),
    ],
)
def test_relative_phrases(query, start):
    dates = extract_dates(query, now=NOW)

    assert dates.start == start
    assert dates.end == NOW


def test_relative_phrase_order():
    # "last month" is checked before "this year"
    dates = extract_dates("this year or last month", now=NOW)

    assert dates.start == datetime(2024, 2, 29, 15, 30, 45)


def test_this_week_starts_on_sunday():
    wednesday = datetime(2024, 3, 27, 9, 0, 0)
    dates = extract_dates("this week", now=wednesday)

    assert dates.start == datetime(2024, 3, 24, 9, 0, 0)
    assert dates.end == wednesday


def test_last_year_from_leap_day_clamps():
    leap_day = datetime(2024, 2, 29, 12, 0, 0)

    assert extract_dates("last year", now=leap_day).start == datetime(2023, 2, 28, 12, 0, 0)


def test_locations_use_original_case():
    result = parse_natural_language("sunset at Santa Monica Beach", now=NOW)

    assert result.locations == ["Santa Monica Beach"]
    assert result.scenes == ["sunset", "beach"]
    assert result.keywords == ["santa", "monica"]
    assert result.confidence == pytest.approx(0.3 + 0.15 * 2 + 0.10 + 0.10)


def test_locations_keep_duplicates_and_order():
    assert extract_locations("from Rome to Paris and back in Rome") == ["Rome", "Rome"]
    assert extract_locations("dinner in Paris at Le Marais") == ["Paris", "Le Marais"]


def test_locations_require_capitalized_place():
    assert extract_locations("dinner in paris") == []
    assert parse_natural_language("dinner in paris", now=NOW).locations is None


def test_keyword_confidence_is_capped():
    result = parse_natural_language("alpha bravo charlie delta echo foxtrot", now=NOW)

    assert len(result.keywords) == 6
    assert result.confidence == pytest.approx(0.3 + 0.15)


def test_confidence_never_exceeds_cap():
    query = " ".join(
        ["beach", "mountain", "city", "park", "forest", "sunset", "dog", "happy"] * 10
    ) + " from 2020 at Lake Tahoe"
    result = parse_natural_language(query, now=NOW)

    assert result.confidence == pytest.approx(0.95)


@pytest.mark.parametrize(
    "query",
    ["!!!", "the a an of", "%%% ??? 9999999", "happy " * 200, "in in in From From"],
)
def test_confidence_in_range_for_odd_input(query):
    result = parse_natural_language(query, now=NOW)

    assert 0 <= result.confidence <= 0.95


def test_only_stop_words_gives_base_confidence():
    result = parse_natural_language("show me my photos", now=NOW)

    assert result.keywords == []
    assert result.model_dump(exclude_none=True) == {"keywords": [], "confidence": pytest.approx(0.3)}


def test_query_suggestions_are_fixed():
    suggestions = get_query_suggestions()

    assert len(suggestions) == 10
    assert suggestions[0] == "beach photos"

    suggestions.clear()
    assert get_query_suggestions()[0] == "beach photos"
