from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from src.dataset.base import DatasetError
from src.dataset.snapshot import SnapshotSchemesClient, apply_predicates
from src.filters.query_builder import Predicate


def _schemes_df() -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "id": 1,
                "scheme": "National Health Mission",
                "description": "Free primary care.",
                "income": 50000,
                "region": "All India",
                "education": "Any",
                "organization": "Ministry of Health",
                "link": "https://nhm.gov.in",
            },
            {
                "id": 2,
                "scheme": "Post Matric Scholarship",
                "description": "Tuition support.",
                "income": 250000,
                "region": "Kerala",
                "education": "Graduate",
                "organization": "Ministry of Education",
                "link": None,
            },
            {
                "id": 3,
                "scheme": "Rural Health Insurance",
                "description": "Insurance for rural families.",
                "income": None,
                "region": "Bihar",
                "education": "Any",
                "organization": "State Health Department",
                "link": "",
            },
        ]
    )


def test_apply_predicates_matches_case_insensitive_substrings() -> None:
    filtered = apply_predicates(_schemes_df(), [Predicate("scheme", "ilike", "HEALTH")])

    assert filtered["id"].tolist() == [1, 3]


def test_apply_predicates_upper_bound_excludes_missing_income() -> None:
    filtered = apply_predicates(_schemes_df(), [Predicate("income", "lte", 100000)])

    assert filtered["id"].tolist() == [1]


def test_apply_predicates_is_conjunctive_and_order_independent() -> None:
    predicates = [Predicate("scheme", "ilike", "health"), Predicate("region", "ilike", "bihar")]

    forward = apply_predicates(_schemes_df(), predicates)
    backward = apply_predicates(_schemes_df(), list(reversed(predicates)))

    assert forward["id"].tolist() == [3]
    assert backward["id"].tolist() == [3]


def test_snapshot_client_reads_csv_and_builds_records(tmp_path: Path) -> None:
    path = tmp_path / "schemes.csv"
    _schemes_df().to_csv(path, index=False)

    client = SnapshotSchemesClient(path)
    records = client.fetch_schemes([Predicate("organization", "ilike", "ministry")])

    assert [record.id for record in records] == [1, 2]
    assert records[0].link == "https://nhm.gov.in"
    assert records[1].link is None
    assert records[1].income == 250000.0


def test_snapshot_client_fills_missing_columns(tmp_path: Path) -> None:
    path = tmp_path / "partial.csv"
    pd.DataFrame([{"id": 9, "scheme": "Pension", "income": 10000}]).to_csv(path, index=False)

    records = SnapshotSchemesClient(path).fetch_schemes([])

    assert len(records) == 1
    assert records[0].scheme == "Pension"
    assert records[0].description is None
    assert records[0].link is None


def test_snapshot_client_missing_file_is_dataset_error(tmp_path: Path) -> None:
    client = SnapshotSchemesClient(tmp_path / "missing.csv")

    with pytest.raises(DatasetError):
        client.fetch_schemes([])


def test_snapshot_client_rejects_unknown_format(tmp_path: Path) -> None:
    path = tmp_path / "schemes.txt"
    path.write_text("id,scheme\n1,x\n", encoding="utf-8")

    with pytest.raises(DatasetError, match="Unsupported snapshot format"):
        SnapshotSchemesClient(path).fetch_schemes([])
