import pytest
import structlog

from affordability.fy import _log_fallback


@pytest.fixture(autouse=True)
def reset_structlog():
    _log_fallback.cache_clear()
    yield
    structlog.reset_defaults()
