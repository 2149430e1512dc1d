from __future__ import annotations

import pytest

from src.filters.criteria import FilterCriteria
from src.filters.query_builder import ParseError, Predicate, build_predicates, parse_income


def test_all_empty_filters_produce_no_predicates() -> None:
    assert build_predicates(FilterCriteria()) == []


def test_whitespace_only_fields_are_treated_as_empty() -> None:
    criteria = FilterCriteria(scheme="   ", income=" ", education="\t", region="", organization="  ")

    assert build_predicates(criteria) == []


def test_one_substring_predicate_per_non_empty_text_field() -> None:
    criteria = FilterCriteria(
        scheme="health",
        education="graduate",
        region="",
        organization="Ministry",
        language="fr",
    )

    predicates = build_predicates(criteria)

    assert predicates == [
        Predicate("scheme", "ilike", "health"),
        Predicate("education", "ilike", "graduate"),
        Predicate("organization", "ilike", "Ministry"),
    ]
    assert all(predicate.column != "language" for predicate in predicates)


def test_substring_values_are_stripped() -> None:
    predicates = build_predicates(FilterCriteria(region="  Tamil Nadu "))

    assert predicates == [Predicate("region", "ilike", "Tamil Nadu")]


def test_income_becomes_upper_bound_predicate() -> None:
    predicates = build_predicates(FilterCriteria(income="50000"))

    assert predicates == [Predicate("income", "lte", 50000)]


def test_non_numeric_income_is_silently_omitted() -> None:
    predicates = build_predicates(FilterCriteria(scheme="health", income="abc"))

    assert predicates == [Predicate("scheme", "ilike", "health")]


def test_parse_income_reads_leading_integer_digits() -> None:
    assert parse_income("50000") == 50000
    assert parse_income(" 12.5") == 12
    assert parse_income("7000 rupees") == 7000
    assert parse_income("-3") == -3


def test_parse_income_raises_for_non_numeric_input() -> None:
    with pytest.raises(ParseError):
        parse_income("abc")
    with pytest.raises(ParseError):
        parse_income("")


def test_health_scenario_predicates() -> None:
    criteria = FilterCriteria(scheme="health", income="50000", language="hi")

    predicates = build_predicates(criteria)

    assert [predicate.describe() for predicate in predicates] == [
        "scheme ilike %health%",
        "income<=50000",
    ]
