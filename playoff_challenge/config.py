"""Application configuration management."""

import os
from functools import lru_cache
from pathlib import Path

from .schemas import AppConfig
from .utils import load_json

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'app_config.json'


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """
    Load application configuration from data/app_config.json.

    Configuration is cached after first load.

    Returns:
        AppConfig object with validated settings

    Raises:
        FileNotFoundError: If app_config.json doesn't exist
        ValueError: If config file has invalid structure

    Example:
        from playoff_challenge.config import get_config
        config = get_config()
        print(f"Scoring format: {config.default_scoring_format}")
    """
    return load_json(CONFIG_PATH, schema=AppConfig)


def get_database_path() -> Path:
    """
    Database file path.

    PLAYOFF_DB_PATH overrides the configured path; relative configured
    paths are resolved against the repository root.
    """
    override = os.environ.get('PLAYOFF_DB_PATH')
    if override:
        return Path(override)
    path = Path(get_config().database_path)
    if not path.is_absolute():
        path = CONFIG_PATH.parent.parent / path
    return path


def get_default_scoring_format() -> str:
    """Get the scoring format used for stored point totals."""
    return get_config().default_scoring_format


def get_default_round() -> str:
    """Get the round assumed when none is stored."""
    return get_config().default_round


def get_round_cache_ttl() -> float:
    """Get the current-round cache time-to-live in seconds."""
    return get_config().round_cache_ttl_seconds


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
