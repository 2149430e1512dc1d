from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import pandas as pd

from src.dataset.base import DatasetError, SchemesClient
from src.filters.query_builder import Predicate
from src.normalize.schema import SchemeRecord

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = [
    "id",
    "scheme",
    "description",
    "income",
    "region",
    "education",
    "organization",
    "link",
]


def load_schemes_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix == ".parquet":
        df = pd.read_parquet(path)
    elif suffix == ".csv":
        df = pd.read_csv(path)
    else:
        raise ValueError(f"Unsupported snapshot format '{path.suffix}' (expected .csv or .parquet).")

    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    for column in missing:
        df[column] = None
    return df[REQUIRED_COLUMNS]


def apply_predicates(df: pd.DataFrame, predicates: Sequence[Predicate]) -> pd.DataFrame:
    filtered = df
    for predicate in predicates:
        if predicate.operator == "ilike":
            column = filtered[predicate.column].fillna("").astype(str)
            mask = column.str.contains(str(predicate.value), case=False, regex=False)
        elif predicate.operator == "lte":
            # Missing incomes never satisfy an upper bound.
            numeric = pd.to_numeric(filtered[predicate.column], errors="coerce")
            mask = numeric.le(float(predicate.value)) & numeric.notna()
        else:
            raise ValueError(f"Unsupported predicate operator '{predicate.operator}'.")
        filtered = filtered[mask]
    return filtered


class SnapshotSchemesClient(SchemesClient):
    """Serves the schemes table from a local CSV/Parquet export."""

    name = "snapshot"

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._df: pd.DataFrame | None = None

    def _frame(self) -> pd.DataFrame:
        if self._df is None:
            try:
                self._df = load_schemes_frame(self.path)
            except (OSError, ValueError) as exc:
                raise DatasetError(f"Could not read schemes snapshot '{self.path}': {exc}") from exc
        return self._df

    def fetch_schemes(self, predicates: Sequence[Predicate]) -> list[SchemeRecord]:
        try:
            filtered = apply_predicates(self._frame(), predicates)
        except KeyError as exc:
            raise DatasetError(f"Unknown column in schemes query: {exc}") from exc
        records = [SchemeRecord.from_row(row) for row in filtered.to_dict(orient="records")]
        logger.info("Matched %d snapshot schemes with %d predicates", len(records), len(predicates))
        return records
