"""
Runtime settings for atlas-local.

Settings are read once from the environment at CLI start-up:

- ATLAS_LOCAL_LOG: log level name (default "info")
- ATLAS_LOCAL_LOG_ALL: when set, log from every library, not just atlas_local
- MONGODB_ATLAS_LOCAL_PREVIEW: "true"/"1" to set up the preview image
- MONGODB_ATLAS_LOCAL_VOYAGE_API_KEY: default Voyage AI key for setup
"""

import os
from dataclasses import dataclass
from typing import Mapping

from atlas_local.exceptions import ConfigError

DEFAULT_IMAGE = "mongodb/mongodb-atlas-local"
"""Image used for new deployments unless --image is given."""

DEFAULT_HEALTH_TIMEOUT = 60.0
"""Seconds to wait for a deployment to report healthy."""

SEARCH_INDEX_WATCH_INTERVAL = 1.0
"""Seconds between search index status polls."""

SPINNER_TICK = 0.08
"""Spinner refresh interval in seconds."""


def parse_bool(name: str, value: str) -> bool:
    """Parse a boolean environment variable value.

    Accepts "true"/"1" and "false"/"0", case-insensitive.

    Raises:
        ConfigError: If the value is anything else.
    """
    normalized = value.strip().lower()
    if normalized in ("true", "1"):
        return True
    if normalized in ("false", "0"):
        return False
    raise ConfigError(name, f"invalid boolean value '{value}', expected true, false, 1 or 0")


@dataclass
class Settings:
    """Environment-derived settings."""

    log_level: str = "info"
    log_all: bool = False
    use_preview: bool | None = None
    voyage_api_key: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from, defaults to os.environ.

        Raises:
            ConfigError: If MONGODB_ATLAS_LOCAL_PREVIEW is not a boolean.
        """
        env = os.environ if environ is None else environ

        preview = env.get("MONGODB_ATLAS_LOCAL_PREVIEW")
        return cls(
            log_level=env.get("ATLAS_LOCAL_LOG", "info"),
            log_all="ATLAS_LOCAL_LOG_ALL" in env,
            use_preview=(
                parse_bool("MONGODB_ATLAS_LOCAL_PREVIEW", preview)
                if preview is not None
                else None
            ),
            voyage_api_key=env.get("MONGODB_ATLAS_LOCAL_VOYAGE_API_KEY") or None,
        )
