"""Configuration."""

from yart.config.manager import ConfigManager, get_config, set_config

__all__ = ["ConfigManager", "get_config", "set_config"]
