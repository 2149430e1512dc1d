from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Mapping

import requests
from requests import Response
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

DEFAULT_USER_AGENT = "GovSchemeSearch/0.1 (+https://localhost; contact=local)"
logger = logging.getLogger(__name__)
_SLOW_REQUEST_SECONDS = 5.0


@dataclass(slots=True)
class PoliteHttpClient:
    """Shared `requests` session for the dataset backend and translation engines.

    GETs are retried on 429/5xx; POSTs are sent once. Safe to share across the
    translation worker threads.
    """

    requests_per_second: float = 0.0
    timeout_seconds: float = 20.0
    user_agent: str = DEFAULT_USER_AGENT
    max_retries: int = 3
    backoff_factor: float = 0.5
    pool_size: int = 16
    _session: requests.Session = field(init=False, repr=False)
    _last_request_monotonic: float = field(init=False, default=0.0)
    _rate_limit_lock: threading.Lock = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

        retry = Retry(
            total=self.max_retries,
            connect=self.max_retries,
            read=self.max_retries,
            status=self.max_retries,
            backoff_factor=self.backoff_factor,
            status_forcelist=(429, 500, 502, 503, 504),
            allowed_methods=frozenset({"GET"}),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(
            max_retries=retry,
            pool_connections=self.pool_size,
            pool_maxsize=self.pool_size,
        )
        self._session.mount("http://", adapter)
        self._session.mount("https://", adapter)
        self._last_request_monotonic = 0.0
        self._rate_limit_lock = threading.Lock()

    def close(self) -> None:
        self._session.close()

    def get_json(
        self,
        url: str,
        *,
        params: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return self._request("GET", url, params=params, headers=headers).json()

    def post_json(
        self,
        url: str,
        *,
        json_body: Any = None,
        form: Mapping[str, Any] | None = None,
        params: Any = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return self._request(
            "POST",
            url,
            params=params,
            headers=headers,
            json_body=json_body,
            form=form,
        ).json()

    @property
    def timeout_tuple(self) -> tuple[float, float]:
        connect_timeout = max(1.0, min(self.timeout_seconds, 5.0))
        read_timeout = max(connect_timeout, self.timeout_seconds)
        return connect_timeout, read_timeout

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: Any = None,
        headers: Mapping[str, str] | None = None,
        json_body: Any = None,
        form: Mapping[str, Any] | None = None,
    ) -> Response:
        self._sleep_for_rate_limit()
        started_at = time.monotonic()
        response = self._session.request(
            method=method,
            url=url,
            params=params,
            headers=dict(headers) if headers else None,
            json=json_body,
            data=form,
            timeout=self.timeout_tuple,
        )
        elapsed = time.monotonic() - started_at
        if elapsed > _SLOW_REQUEST_SECONDS:
            logger.warning("Slow HTTP %s %.3fs %s", method, elapsed, url)
        response.raise_for_status()
        return response

    def _sleep_for_rate_limit(self) -> None:
        if self.requests_per_second <= 0:
            return
        min_interval = 1.0 / self.requests_per_second
        with self._rate_limit_lock:
            elapsed = time.monotonic() - self._last_request_monotonic
            sleep_seconds = min_interval - elapsed
            if sleep_seconds > 0:
                time.sleep(sleep_seconds)
            self._last_request_monotonic = time.monotonic()


def describe_http_error(exc: requests.RequestException) -> str:
    """Best-effort readable message, preferring the JSON `message` of an error body."""
    response = getattr(exc, "response", None)
    if response is None:
        return str(exc) or type(exc).__name__
    detail = ""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("message", "error", "msg", "detail"):
            value = payload.get(key)
            if isinstance(value, dict):
                value = value.get("message")
            if value:
                detail = str(value)
                break
    if not detail:
        detail = (response.text or "").strip()[:200] or str(response.reason or "")
    return f"HTTP {response.status_code}: {detail}" if detail else f"HTTP {response.status_code}"
