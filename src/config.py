from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from src.dataset.base import SchemesClient
from src.dataset.http import PoliteHttpClient
from src.dataset.snapshot import SnapshotSchemesClient
from src.dataset.supabase import DEFAULT_TABLE, SupabaseSchemesClient
from src.translate.base import Translator
from src.translate.engines import DEFAULT_SOURCE_LANGUAGE, ENGINES, build_translator

DEFAULT_ENGINE = "google"
DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_TRANSLATION_WORKERS = 8
DEFAULT_REQUESTS_PER_SECOND = 0.0


def _optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True, slots=True)
class AppSettings:
    """Connection parameters for the schemes backend and the translation engine."""

    supabase_url: str | None = None
    supabase_key: str | None = None
    schemes_table: str = DEFAULT_TABLE
    snapshot_path: Path | None = None
    translate_engine: str = DEFAULT_ENGINE
    translate_key: str | None = None
    translate_url: str | None = None
    source_language: str = DEFAULT_SOURCE_LANGUAGE
    request_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    translation_workers: int = DEFAULT_TRANSLATION_WORKERS
    requests_per_second: float = DEFAULT_REQUESTS_PER_SECOND

    def __post_init__(self) -> None:
        if self.translate_engine not in ENGINES:
            raise ValueError(
                f"TRANSLATE_ENGINE must be one of {sorted(ENGINES)} (received '{self.translate_engine}')."
            )
        if not math.isfinite(self.request_timeout_seconds) or self.request_timeout_seconds <= 0:
            raise ValueError("HTTP_TIMEOUT_SECONDS must be a positive number.")
        if self.translation_workers < 1:
            raise ValueError("TRANSLATION_WORKERS must be at least 1.")
        if not math.isfinite(self.requests_per_second) or self.requests_per_second < 0:
            raise ValueError("HTTP_REQUESTS_PER_SECOND must be zero or a positive number.")
        if bool(self.supabase_url) != bool(self.supabase_key):
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set together.")

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> AppSettings:
        values = payload or {}
        snapshot_text = _optional_text(values.get("SCHEMES_SNAPSHOT_PATH"))
        return cls(
            supabase_url=_optional_text(values.get("SUPABASE_URL")),
            supabase_key=_optional_text(values.get("SUPABASE_KEY")),
            schemes_table=_optional_text(values.get("SCHEMES_TABLE")) or DEFAULT_TABLE,
            snapshot_path=Path(snapshot_text) if snapshot_text else None,
            translate_engine=(_optional_text(values.get("TRANSLATE_ENGINE")) or DEFAULT_ENGINE).lower(),
            translate_key=_optional_text(values.get("TRANSLATE_KEY")),
            translate_url=_optional_text(values.get("TRANSLATE_URL")),
            source_language=_optional_text(values.get("TRANSLATE_SOURCE_LANGUAGE")) or DEFAULT_SOURCE_LANGUAGE,
            request_timeout_seconds=float(values.get("HTTP_TIMEOUT_SECONDS") or DEFAULT_TIMEOUT_SECONDS),
            translation_workers=int(values.get("TRANSLATION_WORKERS") or DEFAULT_TRANSLATION_WORKERS),
            requests_per_second=float(values.get("HTTP_REQUESTS_PER_SECOND") or DEFAULT_REQUESTS_PER_SECOND),
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppSettings:
        return cls.from_mapping(os.environ if environ is None else environ)

    @property
    def dataset_label(self) -> str:
        if self.supabase_url:
            return f"supabase:{self.schemes_table}"
        if self.snapshot_path is not None:
            return f"snapshot:{self.snapshot_path.name}"
        return "unconfigured"

    def build_http_client(self) -> PoliteHttpClient:
        return PoliteHttpClient(
            requests_per_second=self.requests_per_second,
            timeout_seconds=self.request_timeout_seconds,
            pool_size=max(self.translation_workers, 4),
        )

    def build_dataset_client(self, http_client: Any | None = None) -> SchemesClient:
        if self.supabase_url and self.supabase_key:
            return SupabaseSchemesClient(
                self.supabase_url,
                self.supabase_key,
                table=self.schemes_table,
                http_client=http_client,
            )
        if self.snapshot_path is not None:
            return SnapshotSchemesClient(self.snapshot_path)
        raise ValueError("Configure SUPABASE_URL/SUPABASE_KEY or SCHEMES_SNAPSHOT_PATH.")

    def build_translator(self, http_client: Any | None = None) -> Translator:
        return build_translator(
            self.translate_engine,
            api_key=self.translate_key,
            base_url=self.translate_url,
            source_language=self.source_language,
            http_client=http_client,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "dataset": self.dataset_label,
            "translate_engine": self.translate_engine,
            "source_language": self.source_language,
            "request_timeout_seconds": self.request_timeout_seconds,
            "translation_workers": self.translation_workers,
            "requests_per_second": self.requests_per_second,
        }
