from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True, slots=True)
class SchemeRecord:
    """One government scheme row as returned by the dataset backend."""

    id: Any
    scheme: Optional[str]
    description: Optional[str]
    income: Optional[float]
    region: Optional[str]
    education: Optional[str]
    organization: Optional[str]
    link: Optional[str] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> SchemeRecord:
        return cls(
            id=row.get("id"),
            scheme=_coerce_text(row.get("scheme")),
            description=_coerce_text(row.get("description")),
            income=_coerce_income(row.get("income")),
            region=_coerce_text(row.get("region")),
            education=_coerce_text(row.get("education")),
            organization=_coerce_text(row.get("organization")),
            link=_coerce_link(row.get("link")),
        )

    def translated(self, *, scheme: Optional[str], description: Optional[str], language: str) -> TranslatedSchemeRecord:
        return TranslatedSchemeRecord(
            id=self.id,
            scheme=scheme,
            description=description,
            income=self.income,
            region=self.region,
            education=self.education,
            organization=self.organization,
            link=self.link,
            language=language,
        )


@dataclass(frozen=True, slots=True)
class TranslatedSchemeRecord:
    """Copy of a SchemeRecord with `scheme` and `description` in `language`."""

    id: Any
    scheme: Optional[str]
    description: Optional[str]
    income: Optional[float]
    region: Optional[str]
    education: Optional[str]
    organization: Optional[str]
    link: Optional[str]
    language: str


def _coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return str(value)


def _coerce_link(value: Any) -> str | None:
    text = _coerce_text(value)
    if text is None or not text.strip():
        return None
    return text.strip()


def _coerce_income(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(numeric):
        return None
    return numeric
