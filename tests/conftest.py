import pytest

from tracelink import runtime_config


@pytest.fixture(autouse=True)
def reset_runtime_config():
    """Each test starts from default runtime settings."""
    runtime_config.reset()
    yield
    runtime_config.reset()
