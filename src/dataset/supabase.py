from __future__ import annotations

import logging
from typing import Any, Sequence

import requests

from src.dataset.base import DatasetError, SchemesClient
from src.dataset.http import PoliteHttpClient, describe_http_error
from src.filters.query_builder import Predicate
from src.normalize.schema import SchemeRecord

logger = logging.getLogger(__name__)

DEFAULT_TABLE = "schemes"


def predicate_to_param(predicate: Predicate) -> tuple[str, str]:
    """Render one predicate as a PostgREST query parameter."""
    if predicate.operator == "ilike":
        return predicate.column, f"ilike.%{predicate.value}%"
    if predicate.operator == "lte":
        return predicate.column, f"lte.{predicate.value}"
    raise ValueError(f"Unsupported predicate operator '{predicate.operator}'.")


class SupabaseSchemesClient(SchemesClient):
    """Queries the hosted `schemes` table through Supabase's PostgREST endpoint."""

    name = "supabase"

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        table: str = DEFAULT_TABLE,
        http_client: Any | None = None,
    ) -> None:
        if not url:
            raise ValueError("Supabase URL is required.")
        if not api_key:
            raise ValueError("Supabase API key is required.")
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self._api_key = api_key
        self._http_client = http_client or PoliteHttpClient()

    @property
    def headers(self) -> dict[str, str]:
        return {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Accept": "application/json",
        }

    def build_params(self, predicates: Sequence[Predicate]) -> list[tuple[str, str]]:
        return [("select", "*"), *(predicate_to_param(predicate) for predicate in predicates)]

    def fetch_schemes(self, predicates: Sequence[Predicate]) -> list[SchemeRecord]:
        params = self.build_params(predicates)
        try:
            payload = self._http_client.get_json(self.endpoint, params=params, headers=self.headers)
        except requests.RequestException as exc:
            raise DatasetError(describe_http_error(exc)) from exc
        except ValueError as exc:
            raise DatasetError(f"Malformed response from {self.endpoint}: {exc}") from exc

        if not isinstance(payload, list):
            raise DatasetError(f"Expected a list of rows from {self.endpoint}, got {type(payload).__name__}.")

        records: list[SchemeRecord] = []
        for index, row in enumerate(payload):
            if not isinstance(row, dict):
                raise DatasetError(
                    f"Expected row {index} from {self.endpoint} to be an object, got {type(row).__name__}."
                )
            records.append(SchemeRecord.from_row(row))
        logger.info("Fetched %d schemes with %d predicates", len(records), len(predicates))
        return records
