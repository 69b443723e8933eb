"""HTTP API client for the Wireless Tags cloud."""

import asyncio
import logging
import re
from http import HTTPStatus
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientConnectorError, ServerConnectionError
from aiohttp.client import ClientTimeout

from ..config import PlatformConfig
from ..const import DEFAULT_HEADERS, HEADER_SET_MAC
from .exceptions import API_ERROR_TYPES, ApiCallError, TagDidNotRespondError, UnauthorizedAccessError

_LOGGER = logging.getLogger(__name__)

# "MyTagList.ethClient+TagDidNotRespondException" or "MyTagList.TagDidNotRespondException"
_EXCEPTION_TYPE_RE = re.compile(r"^\w+\.(?:\w+\+)?(\w+)$")


class WirelessTagApiClient:
    """JSON-over-HTTP client for the ``*.asmx`` endpoints.

    Every call is a POST with a JSON body. Successful responses wrap their
    payload in a ``{"d": ...}`` envelope, which ``call_api()`` removes.
    """

    __slots__ = ("_session", "_config")

    def __init__(
        self, session: aiohttp.ClientSession, config: Optional[PlatformConfig] = None
    ) -> None:
        """Initialize the API client.

        Args:
            session: aiohttp client session; keeps the sign-in cookie
            config: Connection settings, defaults if omitted
        """
        self._session = session
        self._config = config or PlatformConfig()

    @property
    def config(self) -> PlatformConfig:
        return self._config

    async def call_api(
        self, endpoint: str, body: Optional[Dict[str, Any]] = None, mac: Optional[str] = None
    ) -> Any:
        """Call an API endpoint and return the unwrapped payload.

        Args:
            endpoint: Path of the endpoint, relative to the base URL
            body: JSON request body
            mac: Tag manager to route the call to, sent as ``X-Set-Mac``

        Returns:
            The contents of the response's ``d`` field

        Raises:
            ApiCallError: Or one of its subclasses, if the call failed
        """
        try:
            return await self._request(endpoint, body, mac)
        except TagDidNotRespondError as exc:
            if not self._config.retry_on_error:
                raise
            _LOGGER.warning(
                f"Tag did not respond to {endpoint}, retrying in {self._config.wait_before_retry:.1f}s: {exc}"
            )
            await asyncio.sleep(self._config.wait_before_retry)
            return await self._request(endpoint, body, mac)

    async def _request(self, endpoint: str, body: Optional[Dict[str, Any]], mac: Optional[str]) -> Any:
        url = endpoint if endpoint.startswith(("http://", "https://")) else f"{self._config.base_url}{endpoint}"
        body = body if body is not None else {}
        headers = dict(DEFAULT_HEADERS)
        if mac:
            headers[HEADER_SET_MAC] = mac
        timeout = ClientTimeout(total=self._config.request_timeout)
        max_retries = self._config.api_max_retries

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("HTTP POST %s (mac=%s)", url, mac)

        last_exc: Optional[BaseException] = None
        delay = self._config.retry_base_delay

        for attempt in range(max_retries):
            try:
                async with self._session.post(
                    url, json=body, headers=headers, timeout=timeout
                ) as response:
                    if _LOGGER.isEnabledFor(logging.DEBUG):
                        _LOGGER.debug("HTTP %s response: %s", url, response.status)

                    try:
                        payload = await response.json(content_type=None)
                    except (aiohttp.ContentTypeError, ValueError) as json_err:
                        if response.status == HTTPStatus.OK:
                            _LOGGER.error(f"Invalid JSON from {url}")
                            raise ApiCallError(
                                "Invalid JSON in response", response.status, url, body
                            ) from json_err
                        payload = None

                    if response.status == HTTPStatus.OK:
                        if isinstance(payload, dict) and "d" in payload:
                            return payload["d"]
                        return payload

                    error = self._api_error(response.status, url, body, payload)
                    retryable = response.status >= 500 and not (
                        isinstance(payload, dict) and payload.get("ExceptionType")
                    )
                    if not retryable or attempt >= max_retries - 1:
                        _LOGGER.error(f"API error {url}: {response.status}")
                        raise error
                    _LOGGER.warning(
                        f"Server error {url}: {response.status} (attempt {attempt + 1}/{max_retries}). "
                        f"Retrying in {delay:.1f}s..."
                    )
                    last_exc = error
                    await asyncio.sleep(delay)
                    delay = min(delay * 2, self._config.retry_max_delay)

            except ApiCallError:
                raise
            except (asyncio.TimeoutError, ClientConnectorError, ServerConnectionError) as exc:
                last_exc = exc
                error_type = type(exc).__name__
                if attempt < max_retries - 1:
                    _LOGGER.warning(
                        f"Network error {url} (attempt {attempt + 1}/{max_retries}): {error_type}: {exc}. "
                        f"Retrying in {delay:.1f}s..."
                    )
                    await asyncio.sleep(delay)
                    delay = min(delay * 2, self._config.retry_max_delay)
                else:
                    _LOGGER.error(f"Network error {url} after {max_retries} attempts: {error_type}: {exc}")
            except aiohttp.ClientError as exc:
                _LOGGER.error(f"Client error {url}: {exc}")
                raise ApiCallError(f"Client error: {exc}", None, url, body) from exc

        if isinstance(last_exc, asyncio.TimeoutError):
            raise ApiCallError(
                f"Request timeout after {max_retries} attempts", None, url, body
            ) from last_exc
        raise ApiCallError(
            f"Connection failed after {max_retries} attempts: {last_exc}", None, url, body
        ) from last_exc

    @staticmethod
    def _api_error(status: int, url: str, body: Any, payload: Any) -> ApiCallError:
        """Map an error response onto the matching exception class."""
        error_class = ApiCallError
        message = None
        if isinstance(payload, dict):
            exception_type = payload.get("ExceptionType")
            if exception_type:
                match = _EXCEPTION_TYPE_RE.match(exception_type)
                name = match.group(1) if match else exception_type
                error_class = API_ERROR_TYPES.get(name, ApiCallError)
                message = exception_type
            if payload.get("Message"):
                message = f"{message}: {payload['Message']}" if message else payload["Message"]
        if error_class is ApiCallError and status in (HTTPStatus.UNAUTHORIZED, HTTPStatus.FORBIDDEN):
            error_class = UnauthorizedAccessError
        if message is None:
            try:
                message = HTTPStatus(status).phrase
            except ValueError:
                message = f"HTTP {status}"
        return error_class(message, status, url, body)
