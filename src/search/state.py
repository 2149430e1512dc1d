from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from src.normalize.schema import TranslatedSchemeRecord


class SearchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class SearchState:
    """What the results area should show. `token` identifies the search that produced it."""

    status: SearchStatus = SearchStatus.IDLE
    records: tuple[TranslatedSchemeRecord, ...] = ()
    error: str | None = None
    token: int = 0

    @classmethod
    def idle(cls) -> SearchState:
        return cls()

    @classmethod
    def loading(cls, token: int) -> SearchState:
        return cls(status=SearchStatus.LOADING, token=token)

    @classmethod
    def loaded(cls, records: Sequence[TranslatedSchemeRecord], token: int) -> SearchState:
        return cls(status=SearchStatus.LOADED, records=tuple(records), token=token)

    @classmethod
    def failed(cls, error: str, token: int) -> SearchState:
        return cls(status=SearchStatus.FAILED, error=error, token=token)

    @property
    def is_loading(self) -> bool:
        return self.status is SearchStatus.LOADING
