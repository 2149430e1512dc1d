from __future__ import annotations

from abc import ABC, abstractmethod


class TranslationError(RuntimeError):
    """A single translation call failed."""


class Translator(ABC):
    name: str

    @abstractmethod
    def translate(self, text: str, target_language: str) -> str:
        """Translate `text` into `target_language`, or raise TranslationError."""
