from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Mapping

DEFAULT_LANGUAGE = "en"
LANGUAGE_OPTIONS: dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "es": "Spanish",
    "fr": "French",
}


@dataclass(slots=True)
class FilterCriteria:
    """Current filter inputs plus the display language.

    Values are kept as the raw strings typed into the UI; the query builder
    decides what they mean.
    """

    scheme: str = ""
    income: str = ""
    education: str = ""
    region: str = ""
    organization: str = ""
    language: str = DEFAULT_LANGUAGE

    def update(self, field_name: str, value: Any) -> None:
        if field_name not in _FIELD_NAMES:
            raise KeyError(f"Unknown filter field '{field_name}'.")
        setattr(self, field_name, "" if value is None else str(value))

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> FilterCriteria:
        criteria = cls()
        for field_name, value in (payload or {}).items():
            if field_name in _FIELD_NAMES:
                criteria.update(field_name, value)
        if not criteria.language:
            criteria.language = DEFAULT_LANGUAGE
        return criteria

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


_FIELD_NAMES = frozenset(field.name for field in fields(FilterCriteria))
