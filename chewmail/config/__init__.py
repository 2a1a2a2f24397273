"""Configuration management"""

from .archive_config import AppConfig, ArchiveOptions, parse_cutoff_date
from .config_loader import ConfigError, ConfigLoader

__all__ = ["AppConfig", "ArchiveOptions", "ConfigError", "ConfigLoader", "parse_cutoff_date"]
