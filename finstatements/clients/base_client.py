"""Reusable base for the hosted AI-tools HTTP clients."""

import logging
from typing import Any, Optional

import httpx

from finstatements.utils.retry import with_retry

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """A remote service answered with an error or an unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ClientRequestError(ServiceError):
    """4xx response: the request itself was rejected and is never retried."""


class BaseHTTPClient:
    """Thin wrapper around httpx with auth headers, logging, error mapping and retry.

    Subclasses (PromptClient, ArchiveClient, ...) only implement domain methods.
    ``retry_max_attempts=1`` means every call is a single round-trip.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        app_id: Optional[str] = None,
        usage_key: Optional[str] = None,
        timeout: float = 120.0,
        retry_max_attempts: int = 1,
        retry_initial_delay: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = httpx.Client(
            timeout=timeout,
            headers=self._auth_headers(api_key, app_id, usage_key),
            transport=transport,
        )
        self._retry_max_attempts = max(1, retry_max_attempts)
        self._retry_initial_delay = retry_initial_delay

    @staticmethod
    def _auth_headers(
        api_key: Optional[str], app_id: Optional[str], usage_key: Optional[str]
    ) -> dict[str, str]:
        headers: dict[str, str] = {}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        if app_id:
            headers["X-Generated-App-ID"] = app_id
        if usage_key:
            headers["X-Usage-Key"] = usage_key
        return headers

    # ── HTTP helpers ─────────────────────────────────────────────────

    def _post(
        self,
        endpoint: str,
        *,
        json: Optional[Any] = None,
        files: Optional[dict] = None,
    ) -> Any:
        """POST and decode the JSON reply.

        Retries (only when ``retry_max_attempts > 1``) on:
        - 5xx server errors
        - 429 rate limit
        - Network errors and timeouts

        Never retries 4xx client errors.

        Raises:
            ClientRequestError: 4xx response.
            ServiceError: body is not JSON.
            httpx.HTTPStatusError / httpx.TransportError: retries exhausted.
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"

        @with_retry(
            max_attempts=self._retry_max_attempts,
            initial_delay=self._retry_initial_delay,
            retry_on=(
                httpx.HTTPStatusError,
                httpx.TimeoutException,
                httpx.NetworkError,
            ),
            reraise_on=(ClientRequestError,),
        )
        def _do_post():
            logger.debug("POST %s", url)
            resp = self._client.post(url, json=json, files=files)

            if resp.status_code >= 500 or resp.status_code == 429:
                logger.warning("Retryable error %d from %s", resp.status_code, url)
                resp.raise_for_status()
            elif resp.status_code >= 400:
                logger.warning(
                    "Client error %d for %s - not retrying", resp.status_code, url
                )
                raise ClientRequestError(
                    f"{url} rejected the request ({resp.status_code})",
                    status_code=resp.status_code,
                )

            try:
                return resp.json()
            except ValueError as exc:
                raise ServiceError(
                    f"{url} returned a non-JSON body", status_code=resp.status_code
                ) from exc

        return _do_post()

    # ── lifecycle ────────────────────────────────────────────────────

    def close(self) -> None:
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
