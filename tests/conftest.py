import pytest
import structlog
from structlog.testing import LogCapture

from solidkern.config import CONFIG_ENV, LOG_LEVEL_ENV, TOLERANCE_ENV, reset_config


@pytest.fixture(name="log_output")
def fixture_log_output():
    return LogCapture()


@pytest.fixture(autouse=True)
def fixture_configure_structlog(log_output):
    structlog.configure(processors=[log_output])
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def fixture_clean_config(monkeypatch):
    for name in (CONFIG_ENV, TOLERANCE_ENV, LOG_LEVEL_ENV):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield
    reset_config()
