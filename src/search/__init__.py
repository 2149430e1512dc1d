"""Search pipeline and the state it drives."""

from src.search.pipeline import SchemeSearch
from src.search.state import SearchState, SearchStatus

__all__ = ["SchemeSearch", "SearchState", "SearchStatus"]
