"""
Shared pytest fixtures and configuration for storewatch tests.
"""

import pytest

from storewatch import _reset_global_config, create_watcher
from tests.utils import ReducerStore


@pytest.fixture(autouse=True)
def reset_global_config():
    """Reset the global configuration before each test to prevent state leakage."""
    _reset_global_config()
    yield
    _reset_global_config()


@pytest.fixture
def store():
    """A fresh container holding {"a": {"b": 1}}."""
    return ReducerStore({"a": {"b": 1}})


@pytest.fixture
def watcher(store):
    """A watcher bound to the ``store`` fixture, removed after the test."""
    watcher = create_watcher(store)
    yield watcher
    watcher.remove()


@pytest.fixture
def calls():
    """Recorder usable as a watch() callback; keeps every argument tuple."""

    class Recorder(list):
        def __call__(self, *args):
            self.append(args)

    return Recorder()
