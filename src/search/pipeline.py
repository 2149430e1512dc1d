from __future__ import annotations

import logging
import threading

from src.config import AppSettings
from src.dataset.base import DatasetError, SchemesClient
from src.filters.criteria import FilterCriteria
from src.filters.query_builder import build_predicates
from src.search.state import SearchState
from src.translate.adapter import DEFAULT_MAX_WORKERS, translate_all
from src.translate.base import TranslationError, Translator

logger = logging.getLogger(__name__)

INCOMPLETE_SEARCH_MESSAGE = "Search did not complete."


class SchemeSearch:
    """Filter -> query -> fetch -> translate, tracking the current SearchState.

    Every search gets a monotonically increasing token; only the latest
    token may overwrite the state, so a slow earlier search cannot replace
    the results of a newer one.
    """

    def __init__(
        self,
        dataset_client: SchemesClient,
        translator: Translator,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._dataset_client = dataset_client
        self._translator = translator
        self._max_workers = max_workers
        self._lock = threading.Lock()
        self._last_token = 0
        self._state = SearchState.idle()

    @classmethod
    def from_settings(cls, settings: AppSettings) -> SchemeSearch:
        http_client = settings.build_http_client()
        return cls(
            settings.build_dataset_client(http_client),
            settings.build_translator(http_client),
            max_workers=settings.translation_workers,
        )

    @property
    def state(self) -> SearchState:
        return self._state

    def begin(self) -> SearchState:
        with self._lock:
            self._last_token += 1
            self._state = SearchState.loading(self._last_token)
            return self._state

    def run(self, criteria: FilterCriteria) -> SearchState:
        token = self.begin().token
        predicates = build_predicates(criteria)
        logger.info(
            "Search %d: %s (language=%s)",
            token,
            ", ".join(predicate.describe() for predicate in predicates) or "no filters",
            criteria.language,
        )

        outcome = SearchState.failed(INCOMPLETE_SEARCH_MESSAGE, token)
        try:
            records = self._dataset_client.fetch_schemes(predicates)
            translated = translate_all(
                records,
                criteria.language,
                self._translator,
                max_workers=self._max_workers,
            )
            outcome = SearchState.loaded(translated, token)
        except (DatasetError, TranslationError) as exc:
            logger.error("Error fetching schemes: %s", exc)
            outcome = SearchState.failed(str(exc), token)
        finally:
            self._commit(outcome)
        return self._state

    def _commit(self, outcome: SearchState) -> bool:
        with self._lock:
            if outcome.token != self._last_token:
                logger.info(
                    "Discarding results of stale search %d (latest is %d)",
                    outcome.token,
                    self._last_token,
                )
                return False
            self._state = outcome
            return True
