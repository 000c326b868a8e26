"""HTTP client for a record count API.

Replaces the mock estimator when ``COUNT_API_URL`` is configured. The API
receives the selection list and answers with the matching record count.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import requests
from requests import Response, Session

from .exceptions import CountApiAuthenticationError, CountApiError, CountApiRateLimitError
from .models import Selection

LOGGER = logging.getLogger(__name__)

RETRYABLE_STATUS = frozenset({500, 502, 503, 504})


class RecordCountClient:
    """Fetch record counts for a selection list."""

    COUNT_PATH = "/records/count"

    def __init__(
        self,
        base_url: str,
        timeout_seconds: int,
        max_retries: int,
        initial_backoff_seconds: float,
        access_token: Optional[str] = None,
        session: Optional[Session] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """Initialize the client with authentication and retry configuration."""
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if access_token:
            self.session.headers.update({"Authorization": f"Bearer {access_token}"})
        self.timeout_seconds = timeout_seconds
        self.max_retries = max_retries
        self.initial_backoff_seconds = initial_backoff_seconds
        self.logger = logger or LOGGER

    def estimate(self, selections: Sequence[Selection]) -> int:
        """Return the number of records matching ``selections``.

        Raises:
            CountApiError: For unrecoverable API failures or malformed responses.
        """
        payload = {"selections": self._serialize(selections)}
        response = self._request("POST", self.COUNT_PATH, json_body=payload)
        body = self._parse_json(response)
        count = body.get("count")
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise CountApiError(f"Unexpected count in response: {count!r}")
        return count

    count = estimate

    def _serialize(self, selections: Sequence[Selection]) -> List[Dict[str, Any]]:
        return [
            {
                "category": selection.category,
                "value": selection.value,
                "type": selection.type.value,
                "connector": selection.connector.value if selection.connector else None,
            }
            for selection in selections
        ]

    def _request(
        self, method: str, path: str, *, json_body: Optional[Dict[str, Any]] = None
    ) -> Response:
        url = f"{self.base_url}{path}"
        attempt = 0

        while True:
            try:
                response = self.session.request(
                    method=method,
                    url=url,
                    json=json_body,
                    timeout=self.timeout_seconds,
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                self.logger.debug("Count request failed on attempt %s: %s", attempt + 1, exc)
                if attempt >= self.max_retries:
                    raise CountApiError("Count API request failed.") from exc
                self._sleep_backoff(attempt)
                attempt += 1
                continue

            status = response.status_code
            if status == 429 or status in RETRYABLE_STATUS:
                self.logger.debug("Count API returned %s on attempt %s", status, attempt + 1)
                if attempt >= self.max_retries:
                    if status == 429:
                        raise CountApiRateLimitError(
                            "Exceeded count API rate limit despite retries."
                        )
                    raise CountApiError(f"Count API server error ({status}).")
                self._sleep_backoff(attempt)
                attempt += 1
                continue

            if status in {401, 403}:
                raise CountApiAuthenticationError(
                    "Count API authentication failed. Verify COUNT_API_TOKEN."
                )
            if status >= 400:
                raise CountApiError(f"Count API error ({status}): {response.text}")

            return response

    def _parse_json(self, response: Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError as exc:
            raise CountApiError("Failed to parse count API response as JSON.") from exc
        if not isinstance(body, dict):
            raise CountApiError("Count API response must be a JSON object.")
        return body

    def _sleep_backoff(self, attempt: int) -> None:
        time.sleep(self.initial_backoff_seconds * (2 ** attempt))
