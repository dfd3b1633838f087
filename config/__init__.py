"""Config package facade."""

from config.loader import ConfigError, config_from_dict, load_config
from config.models import (
    Config,
    LogConfig,
    RenameConfig,
    ReportConfig,
    ScanConfig,
    TmdbConfig,
)

__all__ = [
    "Config",
    "ConfigError",
    "LogConfig",
    "RenameConfig",
    "ReportConfig",
    "ScanConfig",
    "TmdbConfig",
    "config_from_dict",
    "load_config",
]
