from __future__ import annotations

from .adapter import translate_all
from .base import TranslationError, Translator
from .engines import ENGINES, build_translator

__all__ = [
    "ENGINES",
    "TranslationError",
    "Translator",
    "build_translator",
    "translate_all",
]
