"""Configuration structures and loading for cascadefetch."""

import logging
import os
import tomllib
from pathlib import Path

import msgspec

logger = logging.getLogger(__name__)

# Default values
DEFAULT_TIMEOUT_MS = 8000
DEFAULT_RETRIES = 1
DEFAULT_MAX_METRICS = 1000
DEFAULT_USER_AGENT = "cascadefetch/0.1 (+https://pypi.org/project/cascadefetch/)"
DEFAULT_ACCEPT = "application/json, text/plain, */*"


# Fetch configuration
class FetchConfig(msgspec.Struct, omit_defaults=True):
    """Default request behavior for every cascade."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    retries: int = DEFAULT_RETRIES
    user_agent: str = DEFAULT_USER_AGENT
    accept: str = DEFAULT_ACCEPT


# Telemetry configuration
class TelemetryConfig(msgspec.Struct, omit_defaults=True):
    """Attempt telemetry settings."""

    max_entries: int = DEFAULT_MAX_METRICS


# Main configuration
class Config(msgspec.Struct, omit_defaults=True):
    """Main configuration structure."""

    fetch: FetchConfig = msgspec.field(default_factory=FetchConfig)
    telemetry: TelemetryConfig = msgspec.field(default_factory=TelemetryConfig)


def _load_from_toml(path: Path) -> dict:
    """Load configuration from TOML file."""
    if not path.exists():
        return {}

    with path.open("rb") as f:
        return tomllib.load(f)


def _save_to_toml(data: dict, path: Path) -> None:
    """Save configuration to TOML file."""
    import tomli_w

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("wb") as f:
        tomli_w.dump(data, f)


def convert_config(data: dict) -> Config:
    """Convert raw dict to Config struct."""
    return msgspec.convert(data, type=Config)


def _env_int(name: str) -> int | None:
    raw = os.environ.get(name)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return None


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config.

    CASCADEFETCH_TIMEOUT_MS: Per-attempt timeout in milliseconds
    CASCADEFETCH_RETRIES: Additional attempts per endpoint
    """
    fetch = config.fetch

    timeout_ms = _env_int("CASCADEFETCH_TIMEOUT_MS")
    if timeout_ms is not None and timeout_ms > 0:
        fetch = msgspec.structs.replace(fetch, timeout_ms=timeout_ms)

    retries = _env_int("CASCADEFETCH_RETRIES")
    if retries is not None and retries >= 0:
        fetch = msgspec.structs.replace(fetch, retries=retries)

    if fetch is not config.fetch:
        config = msgspec.structs.replace(config, fetch=fetch)

    return config


# Config state storage
_config: Config | None = None


def get_config() -> Config:
    """Get the current configuration (singleton)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload configuration from disk."""
    global _config
    _config = load_config()
    return _config


def load_config(path: Path | None = None) -> Config:
    """Load configuration from file with defaults."""
    from .paths import config_file

    config_path = path or config_file()

    raw_data = _load_from_toml(config_path)
    if not raw_data:
        config = Config()
    else:
        config = convert_config(raw_data)

    return _apply_env_overrides(config)


def save_config(config: Config, path: Path | None = None) -> None:
    """Save configuration to file."""
    from .paths import config_file

    config_path = path or config_file()

    data = msgspec.to_builtins(config)
    _save_to_toml(data, config_path)

    # Update singleton
    global _config
    _config = config
