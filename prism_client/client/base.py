"""Base HTTP client for making requests to prism APIs."""

from __future__ import annotations

import logging
from typing import Any, Final, Mapping
from urllib.parse import urlencode, urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from prism_client.shared.errors import PrismError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Final[float] = 10.0
DEFAULT_RETRIES: Final[int] = 3
RETRY_STATUSES: Final[tuple[int, ...]] = (500, 502, 503, 504)


def param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class BaseClient:
    """Thin JSON client around a retrying ``requests.Session``."""

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
        headers: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if headers:
            self.session.headers.update(headers)

        adapter = HTTPAdapter(
            max_retries=Retry(total=retries, backoff_factor=0.5, status_forcelist=RETRY_STATUSES)
        )
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def build_url(self, endpoint: str, params: Mapping[str, Any] | None = None) -> str:
        """Join an endpoint onto the base URL and append query parameters.

        ``None`` values are skipped and booleans are rendered as
        ``true``/``false``.
        """
        url = urljoin(self.base_url, endpoint.lstrip("/"))
        if params:
            query = urlencode(
                [(key, param_value(value)) for key, value in params.items() if value is not None]
            )
            if query:
                url = f"{url}?{query}"
        return url

    def get(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return self.request("GET", endpoint, params=params, headers=headers)

    def post(
        self,
        endpoint: str,
        data: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return self.request("POST", endpoint, data=data, params=params, headers=headers)

    def put(
        self,
        endpoint: str,
        data: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return self.request("PUT", endpoint, data=data, params=params, headers=headers)

    def delete(
        self,
        endpoint: str,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        return self.request("DELETE", endpoint, params=params, headers=headers)

    def request(
        self,
        method: str,
        endpoint: str,
        data: Any = None,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Raises:
            PrismError: ``HTTP_ERROR`` for non-2xx responses, ``NETWORK_ERROR``
                when the request could not be completed.
        """
        url = self.build_url(endpoint, params)
        logger.debug("%s %s", method, url)

        try:
            resp = self.session.request(
                method,
                url,
                json=data,
                headers=dict(headers) if headers else None,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PrismError(f"Request to {url} failed: {e}", "NETWORK_ERROR") from e

        if not resp.ok:
            try:
                details = resp.json()
            except ValueError:
                details = None
            logger.warning("%s %s -> %s", method, url, resp.status_code)
            raise PrismError(
                f"HTTP error {resp.status_code}: {resp.reason}",
                "HTTP_ERROR",
                status=resp.status_code,
                details=details,
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise PrismError(f"Invalid JSON response from {url}", "INVALID_RESPONSE", resp.status_code) from e

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> BaseClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
