"""Core infrastructure layer - no business logic dependencies.

This module provides foundation-level services:
- Configuration management (TOML)
- Key-value storage (SQLite)
- Console management (Rich)
- Logging (Loguru)

Clean architecture principle: The core layer has no dependencies on
domain or application layers.
"""

# Configuration
from .config import (
    Config,
    load_config,
    parse_config,
    get_config_dir,
    get_config_path,
    get_data_dir,
    get_database_path,
    get_log_file_path,
    create_default_config,
    ensure_directories,
)

# Storage
from .database import KeyValueStore, open_store

# Console and output
from .console import CATALOG_THEME, get_console
from .output import log, setup_loguru

__all__ = [
    # Config
    "Config",
    "load_config",
    "parse_config",
    "get_config_dir",
    "get_config_path",
    "get_data_dir",
    "get_database_path",
    "get_log_file_path",
    "create_default_config",
    "ensure_directories",
    # Storage
    "KeyValueStore",
    "open_store",
    # Console and output
    "CATALOG_THEME",
    "get_console",
    "log",
    "setup_loguru",
]
