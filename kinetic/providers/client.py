"""
HTTP client shared by every live provider.

Every call is bounded by a timeout class (standard or long). Transport
errors, 5xx and 429 responses are retried with exponential backoff and
jitter up to ``max_attempts``; timeouts are not retried unless
``retry_on_timeout`` is set.
"""

import logging
from typing import Any, Literal, Optional

import httpx
from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from ..config import HttpConfig


logger = logging.getLogger(__name__)

TimeoutClass = Literal["standard", "long"]

RETRYABLE_STATUS = {429, 500, 502, 503, 504}


class ProviderClient:
    """JSON-over-HTTP client for one provider service.

    Args:
        base_url: Service root URL.
        http: Timeout and retry settings.
        api_key: Optional bearer token.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        http: Optional[HttpConfig] = None,
        api_key: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.http = http or HttpConfig()
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self.client = httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self.http.standard_timeout,
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "ProviderClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _timeout(self, timeout_class: TimeoutClass) -> float:
        if timeout_class == "long":
            return self.http.long_timeout
        return self.http.standard_timeout

    def _should_retry(self, exc: BaseException) -> bool:
        if isinstance(exc, httpx.TimeoutException):
            return self.http.retry_on_timeout
        if isinstance(exc, httpx.HTTPStatusError):
            return exc.response.status_code in RETRYABLE_STATUS
        return isinstance(exc, httpx.TransportError)

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.http.max_attempts),
            wait=wait_random_exponential(multiplier=self.http.initial_delay, max=self.http.max_delay),
            retry=retry_if_exception(self._should_retry),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def request(
        self,
        method: str,
        path: str,
        timeout_class: TimeoutClass = "standard",
        **kwargs: Any,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Responses shaped ``{"success": ..., "data": ...}`` are unwrapped to
        their ``data``.

        Raises:
            httpx.HTTPError: When the last attempt fails.
        """
        timeout = self._timeout(timeout_class)
        for attempt in self._retrying():
            with attempt:
                response = self.client.request(method, path, timeout=timeout, **kwargs)
                response.raise_for_status()

        body = response.json()
        if isinstance(body, dict) and "data" in body and "success" in body:
            return body["data"]
        return body

    def post_json(self, path: str, payload: dict, timeout_class: TimeoutClass = "standard") -> Any:
        logger.debug("POST %s%s", self.base_url, path)
        return self.request("POST", path, timeout_class=timeout_class, json=payload)
