import pytest
from prometheus_client import CollectorRegistry

from mongo_slow.config.env_config import EnvConfig
from mongo_slow.errors.facade import reset_error_handler
from tests.fixtures import RecordingCounter, RecordingHistogram, RecordingErrorHandler


@pytest.fixture(autouse=True)
def _isolate_process_state():
    EnvConfig.clear_cache()
    reset_error_handler()
    yield
    EnvConfig.clear_cache()
    reset_error_handler()


@pytest.fixture
def registry():
    return CollectorRegistry()


@pytest.fixture
def counter():
    return RecordingCounter()


@pytest.fixture
def histogram():
    return RecordingHistogram()


@pytest.fixture
def error_handler():
    return RecordingErrorHandler()
