from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from src.filters.query_builder import Predicate
from src.normalize.schema import SchemeRecord


class DatasetError(RuntimeError):
    """The schemes query could not be executed (network, auth or query failure)."""


class SchemesClient(ABC):
    name: str

    @abstractmethod
    def fetch_schemes(self, predicates: Sequence[Predicate]) -> list[SchemeRecord]:
        """Return every scheme matching all predicates, or raise DatasetError."""
