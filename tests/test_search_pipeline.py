from __future__ import annotations

import threading
from typing import Sequence

import pytest

from app.helpers import NO_RESULTS_MESSAGE, present_results
from src.dataset.base import DatasetError, SchemesClient
from src.filters.criteria import FilterCriteria
from src.filters.query_builder import Predicate
from src.normalize.schema import SchemeRecord
from src.search.pipeline import SchemeSearch
from src.search.state import SearchState, SearchStatus
from src.translate.base import TranslationError, Translator


class _FakeDatasetClient(SchemesClient):
    name = "fake"

    def __init__(self, records: list[SchemeRecord] | None = None, error: Exception | None = None) -> None:
        self.records = records or []
        self.error = error
        self.received: list[list[Predicate]] = []

    def fetch_schemes(self, predicates: Sequence[Predicate]) -> list[SchemeRecord]:
        self.received.append(list(predicates))
        if self.error is not None:
            raise self.error
        return list(self.records)


class _HindiTranslator(Translator):
    name = "hindi"

    def __init__(self, fail_on: str | None = None) -> None:
        self.fail_on = fail_on
        self.calls = 0
        self._lock = threading.Lock()

    def translate(self, text: str, target_language: str) -> str:
        with self._lock:
            self.calls += 1
        if text == self.fail_on:
            raise TranslationError("quota exceeded")
        return f"{text} ({target_language})"


def _records() -> list[SchemeRecord]:
    return [
        SchemeRecord(
            id=101,
            scheme="Health Cover",
            description="Hospital cover for families.",
            income=40000.0,
            region="Kerala",
            education="Any",
            organization="Ministry of Health",
            link="https://example.gov/health",
        ),
        SchemeRecord(
            id=102,
            scheme="Community Health Workers",
            description="Stipend for health volunteers.",
            income=30000.0,
            region="Bihar",
            education="10th pass",
            organization="State Health Society",
            link=None,
        ),
    ]


def test_health_scenario_end_to_end_renders_two_translated_cards() -> None:
    dataset = _FakeDatasetClient(records=_records())
    translator = _HindiTranslator()
    search = SchemeSearch(dataset, translator)
    criteria = FilterCriteria(scheme="health", income="50000", language="hi")

    state = search.run(criteria)

    assert dataset.received == [
        [Predicate("scheme", "ilike", "health"), Predicate("income", "lte", 50000)]
    ]
    assert state.status is SearchStatus.LOADED
    assert [record.id for record in state.records] == [101, 102]
    assert state.records[0].scheme == "Health Cover (hi)"
    assert state.records[1].description == "Stipend for health volunteers. (hi)"
    assert state.records[1].region == "Bihar"
    assert translator.calls == 4

    view = present_results(state)
    assert len(view.cards) == 2
    assert view.message is None
    assert view.cards[0].link == "https://example.gov/health"


def test_zero_records_shows_no_results_without_translation_calls() -> None:
    translator = _HindiTranslator()
    search = SchemeSearch(_FakeDatasetClient(records=[]), translator)

    state = search.run(FilterCriteria(scheme="nothing"))

    assert state.status is SearchStatus.LOADED
    assert state.records == ()
    assert translator.calls == 0
    view = present_results(state)
    assert view.message == NO_RESULTS_MESSAGE
    assert view.button_disabled is False


def test_dataset_failure_surfaces_alert_and_clears_loading() -> None:
    search = SchemeSearch(
        _FakeDatasetClient(error=DatasetError("Network request failed")),
        _HindiTranslator(),
    )

    state = search.run(FilterCriteria())

    assert state.status is SearchStatus.FAILED
    assert not state.is_loading
    view = present_results(state)
    assert view.alert == "Error: Network request failed"
    assert view.cards == ()
    assert view.message == NO_RESULTS_MESSAGE


def test_any_translation_failure_shows_zero_records() -> None:
    search = SchemeSearch(
        _FakeDatasetClient(records=_records()),
        _HindiTranslator(fail_on="Stipend for health volunteers."),
    )

    state = search.run(FilterCriteria(language="hi"))

    assert state.status is SearchStatus.FAILED
    assert state.records == ()
    assert state.error == "quota exceeded"
    assert present_results(state).cards == ()


def test_unexpected_errors_still_clear_loading_before_propagating() -> None:
    search = SchemeSearch(_FakeDatasetClient(error=KeyError("id")), _HindiTranslator())

    with pytest.raises(KeyError):
        search.run(FilterCriteria())

    assert search.state.status is SearchStatus.FAILED
    assert not search.state.is_loading


def test_begin_moves_to_loading_with_increasing_tokens() -> None:
    search = SchemeSearch(_FakeDatasetClient(), _HindiTranslator())

    first = search.begin()
    second = search.begin()

    assert first.status is SearchStatus.LOADING
    assert second.token == first.token + 1
    assert present_results(search.state).button_label == "Searching..."


def test_results_of_a_superseded_search_are_discarded() -> None:
    search: SchemeSearch

    class _OverlappingDatasetClient(_FakeDatasetClient):
        def fetch_schemes(self, predicates: Sequence[Predicate]) -> list[SchemeRecord]:
            # A newer search starts while this one is still fetching.
            search.begin()
            return super().fetch_schemes(predicates)

    search = SchemeSearch(_OverlappingDatasetClient(records=_records()), _HindiTranslator())

    state = search.run(FilterCriteria())

    assert state.status is SearchStatus.LOADING
    assert state.token == 2
    assert search.state.records == ()


def test_initial_state_is_idle() -> None:
    search = SchemeSearch(_FakeDatasetClient(), _HindiTranslator())

    assert search.state == SearchState.idle()
