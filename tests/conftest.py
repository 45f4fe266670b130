"""Pytest configuration and fixtures."""

from concurrent.futures import Executor, Future
from typing import Any, Dict, List, Optional, Tuple

import pytest

from filterable.models import Resource

RESOURCE_URL = "https://api.example.com/users"


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, /, *args, **kwargs):
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


class FakeTransport:
    """Records requests and answers them from a queue of (status, body) responses."""

    def __init__(self, responses: Optional[List[Tuple[int, Any]]] = None):
        self.responses = list(responses or [])
        self.requests: List[Dict[str, Any]] = []

    def queue(self, status_code: int, body: Any = None) -> "FakeTransport":
        self.responses.append((status_code, body))
        return self

    def request(self, method, url, *, handlers, headers=None, data=None):
        self.requests.append(
            {
                "method": method,
                "url": url,
                "headers": dict(headers or {}),
                "data": data,
                "handled_statuses": sorted(handlers),
            }
        )
        status_code, body = self.responses.pop(0) if self.responses else (200, {"data": []})
        future = Future()
        handler = handlers.get(status_code)
        try:
            future.set_result(handler(body) if handler is not None else None)
        except Exception as e:
            future.set_exception(e)
        return future

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return None


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def resource(transport):
    return Resource(RESOURCE_URL, transport=transport)


@pytest.fixture
def query(resource):
    """A fresh builder against the users resource."""
    return resource.query()
