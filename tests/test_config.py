"""Tests for environment settings."""

import pytest

from atlas_local.config import Settings, parse_bool
from atlas_local.exceptions import ConfigError


class TestSettings:
    """Tests for Settings.from_env()."""

    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings == Settings(log_level="info", log_all=False)
        assert settings.use_preview is None

    def test_reads_environment(self):
        settings = Settings.from_env(
            {
                "ATLAS_LOCAL_LOG": "debug",
                "ATLAS_LOCAL_LOG_ALL": "",
                "MONGODB_ATLAS_LOCAL_PREVIEW": "TRUE",
                "MONGODB_ATLAS_LOCAL_VOYAGE_API_KEY": "pa-123",
            }
        )

        assert settings.log_level == "debug"
        assert settings.log_all is True
        assert settings.use_preview is True
        assert settings.voyage_api_key == "pa-123"

    def test_invalid_preview(self):
        with pytest.raises(ConfigError, match="MONGODB_ATLAS_LOCAL_PREVIEW"):
            Settings.from_env({"MONGODB_ATLAS_LOCAL_PREVIEW": "yes"})


@pytest.mark.parametrize(
    "value,expected", [("true", True), ("1", True), ("False", False), ("0", False)]
)
def test_parse_bool(value, expected):
    assert parse_bool("FLAG", value) is expected
