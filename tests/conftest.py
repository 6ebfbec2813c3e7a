"""
Pytest configuration for fanout tests.

Async tests are marked with pytest.mark.asyncio and run under pytest-asyncio.
"""

import pytest

from fanout.core.engines import Timeouts
from fanout.logging import LoggingConfig


@pytest.fixture(autouse=True)
def quiet_logging():
    config = LoggingConfig()
    config.update(log_level="fatal", log_output="stderr")
    yield
    config.update(log_level="info", log_output="stdout")


@pytest.fixture
def fast_timeouts() -> Timeouts:
    return Timeouts(
        connect_timeout=1,
        request_timeout=0.5,
    )


@pytest.fixture
def template() -> str:
    return "GET /{{path}} HTTP/1.1\r\nHost: {{host}}\r\n\r\n"
