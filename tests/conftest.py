from pathlib import Path

import pytest
import structlog

from typedoc_openapi import log
from typedoc_openapi.config import get_settings

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def _reset_global_state():
    get_settings.cache_clear()
    yield
    structlog.reset_defaults()
    log._logging_configured = False
    get_settings.cache_clear()


@pytest.fixture
def getting_started_path() -> Path:
    return FIXTURES / "getting_started.json"
