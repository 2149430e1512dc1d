from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Sequence

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app.helpers import present_results
from src.config import AppSettings
from src.filters.criteria import DEFAULT_LANGUAGE, LANGUAGE_OPTIONS, FilterCriteria
from src.search.pipeline import SchemeSearch
from src.search.state import SearchState, SearchStatus

logger = logging.getLogger("search_schemes")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search government schemes from the command line.")
    parser.add_argument("--scheme", default="", help="Scheme name substring.")
    parser.add_argument("--income", default="", help="Maximum income threshold.")
    parser.add_argument("--education", default="", help="Education substring.")
    parser.add_argument("--region", default="", help="Region substring.")
    parser.add_argument("--organization", default="", help="Organization substring.")
    parser.add_argument(
        "--language",
        default=DEFAULT_LANGUAGE,
        help=f"Target language code ({', '.join(LANGUAGE_OPTIONS)}).",
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=None,
        help="Search a local CSV/Parquet export instead of the configured backend.",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON.")
    return parser.parse_args(argv)


def criteria_from_args(args: argparse.Namespace) -> FilterCriteria:
    return FilterCriteria.from_mapping(
        {
            "scheme": args.scheme,
            "income": args.income,
            "education": args.education,
            "region": args.region,
            "organization": args.organization,
            "language": args.language,
        }
    )


def format_state(state: SearchState, *, as_json: bool) -> str:
    if as_json:
        payload: dict[str, Any] = {
            "status": state.status.value,
            "error": state.error,
            "records": [asdict(record) for record in state.records],
        }
        return json.dumps(payload, indent=2, ensure_ascii=False, default=str)

    view = present_results(state)
    lines: list[str] = []
    if view.alert:
        lines.append(view.alert)
    if view.message:
        lines.append(view.message)
    for card in view.cards:
        lines.append(card.title)
        lines.extend(f"  {label}: {value}" for label, value in card.detail_lines())
        if card.link:
            lines.append(f"  Link: {card.link}")
    return "\n".join(lines)


def run_search(criteria: FilterCriteria, settings: AppSettings) -> SearchState:
    scheme_search = SchemeSearch.from_settings(settings)
    return scheme_search.run(criteria)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        settings = AppSettings.from_env()
        if args.snapshot is not None:
            settings = AppSettings.from_mapping(
                {
                    "SCHEMES_SNAPSHOT_PATH": str(args.snapshot),
                    "TRANSLATE_ENGINE": settings.translate_engine,
                    "TRANSLATE_KEY": settings.translate_key,
                    "TRANSLATE_URL": settings.translate_url,
                    "TRANSLATE_SOURCE_LANGUAGE": settings.source_language,
                    "HTTP_TIMEOUT_SECONDS": settings.request_timeout_seconds,
                    "TRANSLATION_WORKERS": settings.translation_workers,
                    "HTTP_REQUESTS_PER_SECOND": settings.requests_per_second,
                }
            )
        state = run_search(criteria_from_args(args), settings)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    print(format_state(state, as_json=args.json))
    return 0 if state.status is not SearchStatus.FAILED else 1


if __name__ == "__main__":
    raise SystemExit(main())
