"""Configuration management for cascadefetch."""

from cascadefetch.config.paths import (
    config_dir,
    config_file,
)
from cascadefetch.config.settings import (
    Config,
    FetchConfig,
    TelemetryConfig,
    get_config,
    load_config,
    reload_config,
    save_config,
)

__all__ = [
    # paths
    "config_dir",
    "config_file",
    # settings
    "Config",
    "FetchConfig",
    "TelemetryConfig",
    "get_config",
    "load_config",
    "reload_config",
    "save_config",
]
