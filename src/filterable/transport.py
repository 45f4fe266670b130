"""HTTP transport with status-code dispatch."""

import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import requests

from filterable.config.loader import get_transport_settings
from filterable.errors import TransportError
from filterable.utils.logging import get_logger

logger = get_logger(__name__)

StatusHandler = Callable[[Any], Any]
RequestBody = Union[List[Tuple[str, str]], Mapping[str, Any], None]


def decode_body(response: requests.Response) -> Any:
    """Decode a JSON response body, falling back to text (None when empty)."""
    try:
        return response.json()
    except ValueError:
        return response.text or None


class RequestsTransport:
    """
    Issues HTTP requests on a worker pool and dispatches on the status code.

    Each request returns a Future resolving to whatever the matched handler
    returns. Statuses without a handler are logged and resolve to None;
    requests that never get a response resolve with TransportError.
    """

    def __init__(
        self,
        settings: Optional[Dict[str, Any]] = None,
        *,
        executor: Optional[Executor] = None,
    ):
        """
        Initialize transport.

        Args:
            settings: Transport settings (timeout_seconds, user_agent, max_workers, headers).
                Missing keys fall back to the defaults from the config loader.
            executor: Optional executor; a thread pool sized by max_workers is created if None.
        """
        self.settings = get_transport_settings({"transport": settings or {}})
        self.timeout = self.settings["timeout_seconds"]
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=self.settings["max_workers"],
            thread_name_prefix="filterable",
        )

    def _get_headers(self, headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Get HTTP headers for requests."""
        merged = {
            "User-Agent": self.settings["user_agent"],
            "Accept": "application/json",
        }
        merged.update(self.settings["headers"])
        if headers:
            merged.update(headers)
        return merged

    def request(
        self,
        method: str,
        url: str,
        *,
        handlers: Mapping[int, StatusHandler],
        headers: Optional[Mapping[str, str]] = None,
        data: RequestBody = None,
    ) -> Future:
        """Submit a request; the returned Future completes after dispatch."""
        return self._executor.submit(self._send, method, url, dict(handlers), headers, data)

    def _send(
        self,
        method: str,
        url: str,
        handlers: Dict[int, StatusHandler],
        headers: Optional[Mapping[str, str]],
        data: RequestBody,
    ) -> Any:
        logger.debug(f"{method} {url}")
        try:
            response = requests.request(
                method,
                url,
                headers=self._get_headers(headers),
                data=data,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Request failed: {method} {url}: {e}")
            raise TransportError(method, url, e) from e

        status_code = response.status_code
        handler = handlers.get(status_code)
        if handler is None:
            logger.warning(f"Unhandled status {status_code} for {method} {url}")
            return None
        return handler(decode_body(response))

    def close(self) -> None:
        """Wait for in-flight requests and release the worker pool."""
        if self._owns_executor:
            self._executor.shutdown(wait=True)

    def __enter__(self) -> "RequestsTransport":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


_default_transport: Optional[RequestsTransport] = None
_default_transport_lock = threading.Lock()


def get_default_transport() -> RequestsTransport:
    """Shared transport used by builders created without one."""
    global _default_transport
    with _default_transport_lock:
        if _default_transport is None:
            _default_transport = RequestsTransport()
        return _default_transport
