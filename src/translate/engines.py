from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable

import requests

from src.dataset.http import PoliteHttpClient, describe_http_error
from src.translate.base import TranslationError, Translator

DEFAULT_SOURCE_LANGUAGE = "en"
GOOGLE_FREE_URL = "https://translate.googleapis.com/translate_a/single"
GOOGLE_CLOUD_URL = "https://translation.googleapis.com/language/translate/v2"
LIBRE_DEFAULT_URL = "https://libretranslate.com"
DEEPL_FREE_URL = "https://api-free.deepl.com/v2/translate"
DEEPL_PRO_URL = "https://api.deepl.com/v2/translate"


class _HttpTranslator(Translator):
    def __init__(
        self,
        *,
        http_client: Any | None = None,
        source_language: str = DEFAULT_SOURCE_LANGUAGE,
    ) -> None:
        self._http_client = http_client or PoliteHttpClient()
        self.source_language = source_language

    def translate(self, text: str, target_language: str) -> str:
        try:
            payload = self._call(text, target_language)
            return self._extract(payload)
        except requests.RequestException as exc:
            raise TranslationError(f"{self.name} translation failed: {describe_http_error(exc)}") from exc
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise TranslationError(f"{self.name} returned an unexpected payload: {exc}") from exc

    @abstractmethod
    def _call(self, text: str, target_language: str) -> Any:
        """Send one translation request and return the decoded payload."""

    @abstractmethod
    def _extract(self, payload: Any) -> str:
        """Pull the translated text out of the engine payload."""


class GoogleTranslator(_HttpTranslator):
    """Google Translate. Keyless `gtx` endpoint unless an API key is given."""

    name = "google"

    def __init__(self, *, api_key: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key

    def _call(self, text: str, target_language: str) -> Any:
        if self.api_key:
            return self._http_client.post_json(
                GOOGLE_CLOUD_URL,
                params={"key": self.api_key},
                json_body={
                    "q": text,
                    "source": self.source_language,
                    "target": target_language,
                    "format": "text",
                },
            )
        return self._http_client.get_json(
            GOOGLE_FREE_URL,
            params={
                "client": "gtx",
                "sl": self.source_language,
                "tl": target_language,
                "dt": "t",
                "q": text,
            },
        )

    def _extract(self, payload: Any) -> str:
        if isinstance(payload, dict):
            return str(payload["data"]["translations"][0]["translatedText"])
        # gtx: [[["translated", "original", ...], ...], ...]
        return "".join(str(segment[0]) for segment in payload[0] if segment and segment[0])


class LibreTranslator(_HttpTranslator):
    name = "libre"

    def __init__(self, *, base_url: str | None = None, api_key: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.endpoint = f"{(base_url or LIBRE_DEFAULT_URL).rstrip('/')}/translate"
        self.api_key = api_key

    def _call(self, text: str, target_language: str) -> Any:
        body = {
            "q": text,
            "source": self.source_language,
            "target": target_language,
            "format": "text",
        }
        if self.api_key:
            body["api_key"] = self.api_key
        return self._http_client.post_json(self.endpoint, json_body=body)

    def _extract(self, payload: Any) -> str:
        return str(payload["translatedText"])


class DeepLTranslator(_HttpTranslator):
    name = "deepl"

    def __init__(self, *, api_key: str | None = None, base_url: str | None = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if not api_key:
            raise ValueError("DeepL requires an API key.")
        self.api_key = api_key
        if base_url:
            self.endpoint = base_url
        else:
            self.endpoint = DEEPL_FREE_URL if api_key.endswith(":fx") else DEEPL_PRO_URL

    def _call(self, text: str, target_language: str) -> Any:
        return self._http_client.post_json(
            self.endpoint,
            headers={"Authorization": f"DeepL-Auth-Key {self.api_key}"},
            form={
                "text": text,
                "source_lang": self.source_language.upper(),
                "target_lang": target_language.upper(),
            },
        )

    def _extract(self, payload: Any) -> str:
        return str(payload["translations"][0]["text"])


ENGINES: dict[str, Callable[..., Translator]] = {
    "google": GoogleTranslator,
    "libre": LibreTranslator,
    "deepl": DeepLTranslator,
}


def build_translator(
    engine: str,
    *,
    api_key: str | None = None,
    base_url: str | None = None,
    source_language: str = DEFAULT_SOURCE_LANGUAGE,
    http_client: Any | None = None,
) -> Translator:
    normalized = engine.strip().lower()
    if normalized not in ENGINES:
        raise ValueError(f"Unknown translation engine '{engine}'. Choose one of: {', '.join(sorted(ENGINES))}.")
    kwargs: dict[str, Any] = {
        "api_key": api_key,
        "source_language": source_language,
        "http_client": http_client,
    }
    if normalized != "google":
        kwargs["base_url"] = base_url
    return ENGINES[normalized](**kwargs)
