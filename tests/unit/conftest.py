"""Fixtures for router unit tests: fake request, responder, error channel and DAO."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from tablerest.runtime.capability import CAPABILITIES, DaoOperations
from tablerest.runtime.generic_router import RequestContext


@pytest.fixture
def request_context() -> RequestContext:
    """Fake request with empty body, params and query."""
    return RequestContext(body={}, params={}, query={})


@pytest.fixture
def response() -> MagicMock:
    """Fake responder; status() returns the responder so json() can be chained."""
    res = MagicMock(name="response")
    res.status.return_value = res
    return res


@pytest.fixture
def next_() -> MagicMock:
    """Fake error channel."""
    return MagicMock(name="next")


@pytest.fixture
def dao() -> Any:
    """DAO with every operation present, each an AsyncMock."""
    return DaoOperations(**{name: AsyncMock(name=name) for name in CAPABILITIES})
