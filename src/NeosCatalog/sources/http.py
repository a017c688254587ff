"""Shared JSON-over-HTTP client for the Solr index and the holdings service.

Retries transient failures with exponential backoff and wraps every failure
that survives the retries in ``UpstreamError``.
"""

from __future__ import annotations

import random
import time
from typing import Any, Mapping

import requests

from NeosCatalog.core.errors import UpstreamError
from NeosCatalog.utils.log import log

BASE_PAUSE = 0.5
MAX_SLEEP = 5.0
RETRYABLE_STATUS = {429, 500, 502, 503, 504}

HEADERS = {
    "User-Agent": "neos-catalog/0.1",
    "Accept": "application/json",
}


class JsonApiClient:
    """Low-level HTTP client returning decoded JSON bodies.

    Responsible only for transport; building parameters and parsing payloads
    are handled elsewhere.
    """

    def __init__(self, base_url: str, *, service: str, timeout: float, max_attempts: int) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            base_url: Service root, without trailing slash.
            service: Name used in logs and ``UpstreamError.service``.
            timeout: Per-request timeout in seconds.
            max_attempts: Attempts per request, including the first one.
        """
        self.base_url = base_url.rstrip("/")
        self.service = service
        self.timeout = timeout
        self.max_attempts = max(1, max_attempts)
        self._session = requests.Session()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def __enter__(self) -> JsonApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_json(self, path: str, *, params: Mapping[str, Any] | None = None) -> Any:
        """GET ``{base_url}/{path}`` and decode the JSON body.

        Args:
            path: Path below the base URL.
            params: Query parameters; list values become repeated keys.

        Returns:
            Decoded JSON value.

        Raises:
            UpstreamError: On network failure, non-2xx status after retries, or
                an undecodable body.
        """
        url = f"{self.base_url}/{path.lstrip('/')}"
        response = self._get_with_retry(url, params=dict(params or {}))
        if response.status_code >= 400:
            raise UpstreamError(
                f"{self.service} returned HTTP {response.status_code} for {url}",
                service=self.service,
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as error:
            raise UpstreamError(f"{self.service} returned invalid JSON for {url}", service=self.service) from error

    def _get_with_retry(self, url: str, *, params: dict[str, Any]) -> requests.Response:
        """Issue GET with retries for transient failures."""
        last_error: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                log.debug("%s request attempt %d/%d to %s", self.service, attempt, self.max_attempts, url)
                response = self._session.get(url, params=params, headers=HEADERS, timeout=self.timeout)
                if response.status_code in RETRYABLE_STATUS and attempt < self.max_attempts:
                    raise requests.HTTPError(f"HTTP {response.status_code}", response=response)
                return response
            except (requests.Timeout, requests.ConnectionError, requests.HTTPError) as error:
                last_error = error
                if attempt < self.max_attempts:
                    delay = min(BASE_PAUSE * (2 ** (attempt - 1)) + random.uniform(0, 0.3), MAX_SLEEP)
                    log.debug(
                        "%s retry attempt=%d/%d delay=%.2fs error=%s",
                        self.service,
                        attempt,
                        self.max_attempts,
                        delay,
                        error,
                    )
                    time.sleep(delay)

        assert last_error is not None
        raise UpstreamError(f"{self.service} request failed: {last_error}", service=self.service) from last_error
