"""Pipeline configuration management."""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from .schemas import GraphicConfig
from .utils import load_json

logger = logging.getLogger('tgg.config')

CONFIG_PATH = Path(__file__).parent.parent / 'data' / 'graphic_config.json'


@lru_cache(maxsize=1)
def get_config() -> GraphicConfig:
    """
    Load pipeline configuration from data/graphic_config.json.

    Configuration is cached after first load. When the file is absent (e.g.
    an installed package without the data directory) the schema defaults
    are used.

    Returns:
        GraphicConfig object with validated settings

    Raises:
        ValueError: If the config file has invalid structure
    """
    if not CONFIG_PATH.exists():
        logger.debug(f'No config file at {CONFIG_PATH}, using defaults')
        return GraphicConfig()
    return load_json(CONFIG_PATH, schema=GraphicConfig)


def get_pokemon_data_url() -> str:
    """Get the remote species metadata URL."""
    return get_config().pokemon_data_url


def get_local_asset_dir() -> Optional[Path]:
    """Get the local sprite directory, if one is configured."""
    asset_dir = get_config().local_asset_dir
    return Path(asset_dir) if asset_dir else None


def get_request_timeout() -> float:
    """Get the network timeout in seconds."""
    return get_config().request_timeout


def get_max_response_bytes() -> int:
    """Get the maximum number of bytes read from a scraped page."""
    return get_config().max_response_bytes


def get_user_agent() -> str:
    """Get the User-Agent sent with outgoing requests."""
    return get_config().user_agent


def get_usage_top_n() -> int:
    """Get the default length of the usage ranking."""
    return get_config().usage_top_n


def clear_config_cache() -> None:
    """
    Clear the configuration cache.

    Use this if the config file is modified during runtime
    and you need to reload it.
    """
    get_config.cache_clear()
