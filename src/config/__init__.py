"""
Configuration loader.

App config: reads config.yaml, resolves the session credential from env vars.
"""

from config.loader import (
    AlertingConfig,
    AnalyticsConfig,
    AppConfig,
    PollingConfig,
    VenueConfig,
    load_config,
)

__all__ = [
    "AlertingConfig",
    "AnalyticsConfig",
    "AppConfig",
    "PollingConfig",
    "VenueConfig",
    "load_config",
]
