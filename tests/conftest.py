# Test configuration

import pytest
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture(autouse=True)
def fresh_settings():
    """Re-read settings for every test so environment overrides apply."""
    from jsontable.config.settings import get_settings
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings_env(monkeypatch):
    """Set JSONTABLE_* environment variables for a test."""
    from jsontable.config.settings import get_settings

    def _set(**values):
        for key, value in values.items():
            monkeypatch.setenv(f"JSONTABLE_{key.upper()}", str(value))
        get_settings.cache_clear()
        return get_settings()

    return _set


@pytest.fixture
def parser():
    """Value parser with the default missing-value indicators."""
    from jsontable.config.settings import get_settings
    from jsontable.ingest.type_resolver import ValueParser
    return ValueParser(missing_value_indicators=frozenset(get_settings().missing_value_indicators))
