from __future__ import annotations

from pathlib import Path

import pytest

from datacom_api.config import clear_runtime_defaults_cache

from live_test_config import LIVE_TESTS_ENABLED


def pytest_ignore_collect(collection_path, config):  # pragma: no cover - pytest hook
    del config
    if LIVE_TESTS_ENABLED:
        return False
    path = Path(str(collection_path))
    return path.name.startswith("live_")


@pytest.fixture(autouse=True)
def _fresh_runtime_defaults():
    clear_runtime_defaults_cache()
    yield
    clear_runtime_defaults_cache()
