"""
Unit tests for configuration validation.
"""

from unittest.mock import patch

import pytest

import config
from config import Config


@pytest.fixture
def valid_credentials():
    values = {
        "OPENAI_API_KEY": "sk-test",
        "SUPABASE_URL": "https://example.supabase.co",
        "SUPABASE_KEY": "anon-key",
    }
    with patch.object(config, "_get", lambda key, default="": values.get(key, default)), \
            patch.multiple(Config, **values):
        yield


class TestConfig:

    def test_defaults_are_valid(self, valid_credentials):
        assert Config.validate() == []

    @pytest.mark.parametrize(
        "name, value",
        [("RELEVANCE_THRESHOLD", 1.5), ("TOP_K", 0), ("MIN_CHUNK_LENGTH", 0), ("INGEST_WORKERS", 0)],
    )
    def test_out_of_range_values_are_reported(self, valid_credentials, name, value):
        with patch.object(Config, name, value):
            assert len(Config.validate()) == 1

    def test_only_settings_in_use_are_exposed(self):
        assert not hasattr(Config, "UPLOAD_DIR")
