"""Configuration for srclens."""

from settings.config import CONFIG_FILENAME, ConfigError, SrcLensConfig, load_config

__all__ = ["CONFIG_FILENAME", "ConfigError", "SrcLensConfig", "load_config"]
