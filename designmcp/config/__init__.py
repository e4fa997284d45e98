"""Configuration module for designmcp."""

from designmcp.config.loader import load_config, get_config_path
from designmcp.config.schema import Config
from designmcp.config.access import get_config, clear_config_cache

__all__ = ["Config", "load_config", "get_config_path", "get_config", "clear_config_cache"]
