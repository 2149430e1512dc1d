from __future__ import annotations

import concurrent.futures
import logging
from typing import Sequence

from src.normalize.schema import SchemeRecord, TranslatedSchemeRecord
from src.translate.base import TranslationError, Translator

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8
TRANSLATED_FIELDS = ("scheme", "description")


def _translate_text(translator: Translator, text: str | None, target_language: str) -> str | None:
    if text is None or not text.strip():
        return text
    return translator.translate(text, target_language)


def translate_all(
    records: Sequence[SchemeRecord],
    target_language: str,
    translator: Translator,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[TranslatedSchemeRecord]:
    """Translate name and description of every record, all-or-nothing.

    Both fields of every record are submitted at once; the first failure
    cancels whatever has not started yet and raises TranslationError.
    """
    if not records:
        return []

    results: dict[tuple[int, str], str | None] = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        pending: dict[concurrent.futures.Future[str | None], tuple[int, str]] = {}
        for index, record in enumerate(records):
            for field_name in TRANSLATED_FIELDS:
                future = executor.submit(
                    _translate_text,
                    translator,
                    getattr(record, field_name),
                    target_language,
                )
                pending[future] = (index, field_name)

        done, not_done = concurrent.futures.wait(
            pending,
            return_when=concurrent.futures.FIRST_EXCEPTION,
        )
        failed = [future for future in done if future.exception() is not None]
        if failed:
            for future in not_done:
                future.cancel()
            index, field_name = pending[failed[0]]
            exc = failed[0].exception()
            logger.error(
                "Translation of %s for scheme %r into %s failed: %s",
                field_name,
                records[index].id,
                target_language,
                exc,
            )
            if isinstance(exc, TranslationError):
                raise exc
            raise TranslationError(f"Translation failed: {exc}") from exc

        for future, key in pending.items():
            results[key] = future.result()

    translated = [
        record.translated(
            scheme=results[(index, "scheme")],
            description=results[(index, "description")],
            language=target_language,
        )
        for index, record in enumerate(records)
    ]
    logger.info("Translated %d schemes into %s", len(translated), target_language)
    return translated
