"""
Pytest configuration and shared fixtures

Most tests run generators on a frozen clock so that every flake lands in the
same interval and the allocator's behaviour is fully deterministic apart from
its random bits.
"""

from typing import Iterator

import pytest

from hashflake import flake as flake_module
from hashflake.flake import Flaker
from hashflake.kernel.layout import DEFAULT_EPOCH_START_NS, TICK_NANOS
from hashflake.kernel.logging import configure_logging
from hashflake.kernel.settings import GeneratorSettings
from hashflake.kernel.time import TestTimeProvider

# Interval used by the frozen clock (start of interval, so small advances stay inside it)
FROZEN_INTERVAL = 1000


@pytest.fixture(autouse=True, scope="session")
def quiet_logging() -> None:
    """Keep debug logs of the allocator out of test output"""
    configure_logging(json_output=False, log_level="WARNING")


@pytest.fixture
def test_time() -> TestTimeProvider:
    """Provide a frozen clock sitting at the start of interval FROZEN_INTERVAL"""
    return TestTimeProvider(DEFAULT_EPOCH_START_NS + FROZEN_INTERVAL * TICK_NANOS)


@pytest.fixture
def flaker(test_time: TestTimeProvider) -> Flaker:
    """Provide a generator with node id 7 on the frozen clock"""
    return Flaker(GeneratorSettings(node_id=7), time_provider=test_time)


@pytest.fixture
def fresh_default(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop the process-wide default generator before and after a test"""
    monkeypatch.setattr(flake_module, "_default", None)
    yield
    flake_module._default = None
