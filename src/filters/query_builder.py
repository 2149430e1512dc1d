from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Literal

from src.filters.criteria import FilterCriteria

logger = logging.getLogger(__name__)

Operator = Literal["ilike", "lte"]

SCHEME_COLUMN = "scheme"
SUBSTRING_COLUMNS = ("education", "region", "organization")
INCOME_COLUMN = "income"
_LEADING_INTEGER_PATTERN = re.compile(r"^\s*([+-]?\d+)")


class ParseError(ValueError):
    """Raised when the income filter does not start with an integer."""


@dataclass(frozen=True, slots=True)
class Predicate:
    column: str
    operator: Operator
    value: str | int

    def describe(self) -> str:
        if self.operator == "ilike":
            return f"{self.column} ilike %{self.value}%"
        return f"{self.column}<={self.value}"


def parse_income(raw_value: str) -> int:
    """Parse leading base-10 digits: "50000" -> 50000, "12.5" -> 12, "abc" fails."""
    match = _LEADING_INTEGER_PATTERN.match(raw_value)
    if match is None:
        raise ParseError(f"Income filter '{raw_value}' is not a number.")
    return int(match.group(1), 10)


def build_predicates(criteria: FilterCriteria) -> list[Predicate]:
    predicates: list[Predicate] = []

    scheme = str(criteria.scheme).strip()
    if scheme:
        predicates.append(Predicate(SCHEME_COLUMN, "ilike", scheme))

    income = str(criteria.income).strip()
    if income:
        try:
            predicates.append(Predicate(INCOME_COLUMN, "lte", parse_income(income)))
        except ParseError:
            # Non-numeric income is treated as unconstrained.
            logger.debug("Ignoring non-numeric income filter %r", criteria.income)

    for column in SUBSTRING_COLUMNS:
        value = str(getattr(criteria, column)).strip()
        if value:
            predicates.append(Predicate(column, "ilike", value))

    return predicates
