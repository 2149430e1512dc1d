from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from src.normalize.schema import TranslatedSchemeRecord
from src.search.state import SearchState, SearchStatus

SEARCH_LABEL = "Search"
SEARCHING_LABEL = "Searching..."
LOADING_MESSAGE = "Loading schemes..."
NO_RESULTS_MESSAGE = "No schemes found"
LINK_LABEL = "Visit Website"


@dataclass(frozen=True, slots=True)
class SchemeCard:
    key: str
    title: str
    income: str
    description: str
    region: str
    education: str
    organization: str
    link: str | None

    def detail_lines(self) -> list[tuple[str, str]]:
        return [
            ("Income Level", self.income),
            ("Description", self.description),
            ("Region", self.region),
            ("Education", self.education),
            ("Organization", self.organization),
        ]


@dataclass(frozen=True, slots=True)
class ResultsView:
    button_label: str
    button_disabled: bool
    message: str | None
    alert: str | None
    cards: tuple[SchemeCard, ...]


def present_results(state: SearchState) -> ResultsView:
    if state.status is SearchStatus.LOADING:
        return ResultsView(
            button_label=SEARCHING_LABEL,
            button_disabled=True,
            message=LOADING_MESSAGE,
            alert=None,
            cards=(),
        )

    alert = f"Error: {state.error}" if state.status is SearchStatus.FAILED else None
    cards = tuple(build_card(record) for record in state.records) if state.status is SearchStatus.LOADED else ()
    return ResultsView(
        button_label=SEARCH_LABEL,
        button_disabled=False,
        message=None if cards else NO_RESULTS_MESSAGE,
        alert=alert,
        cards=cards,
    )


def build_card(record: TranslatedSchemeRecord) -> SchemeCard:
    return SchemeCard(
        key=str(record.id),
        title=_display_text(record.scheme),
        income=format_income(record.income),
        description=_display_text(record.description),
        region=_display_text(record.region),
        education=_display_text(record.education),
        organization=_display_text(record.organization),
        link=record.link,
    )


def format_income(value: Any) -> str:
    if value is None:
        return "Unknown"
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return str(value)
    if math.isnan(numeric):
        return "Unknown"
    if numeric.is_integer():
        return f"{numeric:,.0f}"
    return f"{numeric:,.2f}"


def _display_text(value: str | None) -> str:
    if value is None:
        return ""
    return value
