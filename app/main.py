from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.helpers import LINK_LABEL, LOADING_MESSAGE, SEARCHING_LABEL, ResultsView, present_results
from src.config import AppSettings
from src.filters.criteria import DEFAULT_LANGUAGE, LANGUAGE_OPTIONS, FilterCriteria
from src.search.pipeline import SchemeSearch
from src.search.state import SearchState

FILTER_INPUTS = (
    ("scheme", "Scheme Name"),
    ("income", "Income Level"),
    ("education", "Education Level"),
    ("region", "Region"),
    ("organization", "Organization"),
)


def _ensure_session_state() -> None:
    if "filters" not in st.session_state:
        st.session_state.filters = FilterCriteria()
    if "search_state" not in st.session_state:
        st.session_state.search_state = SearchState.idle()
    if "scheme_search" not in st.session_state:
        st.session_state.scheme_search = None
        st.session_state.settings_error = None
        try:
            settings = AppSettings.from_env()
            st.session_state.settings = settings
            st.session_state.scheme_search = SchemeSearch.from_settings(settings)
        except ValueError as exc:
            st.session_state.settings = None
            st.session_state.settings_error = str(exc)
    for field_name, _ in FILTER_INPUTS:
        st.session_state.setdefault(f"filter_{field_name}", "")
    st.session_state.setdefault("filter_language", DEFAULT_LANGUAGE)


def _on_filter_change(field_name: str) -> None:
    st.session_state.filters.update(field_name, st.session_state[f"filter_{field_name}"])


def _render_filters(view: ResultsView, *, search_ready: bool) -> bool:
    columns = st.columns(3)
    for index, (field_name, label) in enumerate(FILTER_INPUTS):
        columns[index % 3].text_input(
            label,
            key=f"filter_{field_name}",
            placeholder=label,
            on_change=_on_filter_change,
            args=(field_name,),
        )
    columns[len(FILTER_INPUTS) % 3].selectbox(
        "Language",
        options=list(LANGUAGE_OPTIONS),
        format_func=lambda code: LANGUAGE_OPTIONS[code],
        key="filter_language",
        on_change=_on_filter_change,
        args=("language",),
    )
    button_slot = st.empty()
    clicked = button_slot.button(
        view.button_label,
        type="primary",
        disabled=view.button_disabled or not search_ready,
        key="search_button",
    )
    if clicked:
        button_slot.button(
            SEARCHING_LABEL,
            disabled=True,
            key="search_button_busy",
        )
    return clicked


def _render_results(view: ResultsView) -> None:
    if view.alert:
        st.error(view.alert)
    if view.message:
        st.write(view.message)
    for card in view.cards:
        with st.container(border=True):
            st.subheader(card.title)
            for label, value in card.detail_lines():
                st.markdown(f"**{label}:** {value}")
            if card.link:
                st.link_button(LINK_LABEL, card.link)


def main() -> None:
    st.set_page_config(page_title="Government Scheme Search", layout="wide")
    st.title("Search Government Schemes")

    _ensure_session_state()
    scheme_search: SchemeSearch | None = st.session_state.scheme_search
    if st.session_state.settings_error:
        st.warning(f"Search is unavailable: {st.session_state.settings_error}")
    elif st.session_state.settings is not None:
        st.caption(f"Dataset: {st.session_state.settings.dataset_label}")
        with st.sidebar:
            st.header("Configuration")
            st.json(st.session_state.settings.to_dict())

    view = present_results(st.session_state.search_state)
    if _render_filters(view, search_ready=scheme_search is not None) and scheme_search is not None:
        with st.spinner(LOADING_MESSAGE):
            try:
                st.session_state.search_state = scheme_search.run(st.session_state.filters)
            except Exception as exc:
                st.session_state.search_state = scheme_search.state
                st.error(f"Search failed: {exc}")
            else:
                st.rerun()

    _render_results(present_results(st.session_state.search_state))


if __name__ == "__main__":
    main()
