"""
Configuration management for Song Catalog
"""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


@dataclass
class StorageConfig:
    """Configuration for the local key-value store."""

    database_path: Optional[str] = None  # Default: <data dir>/song_catalog.db
    namespace: str = "catalogo-bks-v4"  # Key of the primary song list
    sort_key: str = "catalogo-sort"  # Key of the sort preference


@dataclass
class PlayerConfig:
    """Configuration for audio preview playback."""

    mpv_socket_path: Optional[str] = None
    volume: int = 70


@dataclass
class AccessConfig:
    """Configuration for the access gate."""

    enabled: bool = False
    strategy: str = "roles"  # 'roles' (document store lookup) or 'allow_list'
    email: Optional[str] = None  # Identity used by the CLI
    allowed_emails: List[str] = field(default_factory=list)
    users_collection: str = "users"

    def validate(self) -> None:
        """Validate access configuration values.

        Raises:
            ValueError: If configuration values are invalid
        """
        valid_strategies = {"roles", "allow_list"}
        if self.strategy not in valid_strategies:
            raise ValueError(
                f"Invalid access strategy: {self.strategy!r}. "
                f"Valid strategies are: {valid_strategies}"
            )


@dataclass
class CloudConfig:
    """Configuration for the cloud document store."""

    enabled: bool = False
    project_id: str = ""
    api_key: str = ""
    collection: str = "catalogs"
    document_id: str = "default"
    timeout_seconds: float = 15.0


@dataclass
class ExportConfig:
    """Configuration for spreadsheet export."""

    output_dir: Optional[str] = None  # Default: current working directory
    filename_prefix: str = "catalogo-bks"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_file: Optional[str] = (
        None  # Custom log file path (default: ~/.local/share/song-catalog/song-catalog.log)
    )


@dataclass
class Config:
    """Main configuration object."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    player: PlayerConfig = field(default_factory=PlayerConfig)
    access: AccessConfig = field(default_factory=AccessConfig)
    cloud: CloudConfig = field(default_factory=CloudConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "song-catalog"
    return Path.home() / ".config" / "song-catalog"


def get_config_path() -> Path:
    """Get the main configuration file path.

    Checks for config.toml in the following order:
    1. Current working directory
    2. XDG_CONFIG_HOME/song-catalog (or ~/.config/song-catalog)
    """
    local_config = Path.cwd() / "config.toml"
    if local_config.exists():
        return local_config

    return get_config_dir() / "config.toml"


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_home = os.environ.get("XDG_DATA_HOME")
    if data_home:
        return Path(data_home) / "song-catalog"
    return Path.home() / ".local" / "share" / "song-catalog"


def create_default_config() -> str:
    """Create a default configuration TOML content."""
    return """
# Song Catalog Configuration

[storage]
# SQLite file backing the key-value store (default: data dir)
# database_path = "~/.local/share/song-catalog/song_catalog.db"

# Key holding the primary song list; backups use "<namespace>-backup-<timestamp>"
namespace = "catalogo-bks-v4"

# Key holding the list sort preference
sort_key = "catalogo-sort"

[player]
# Path for mpv socket (auto-detected if not specified)
# mpv_socket_path = "/tmp/mpv-song-catalog"

# Preview volume (0-100)
volume = 70

[access]
# Require an authorized identity before the catalog opens
enabled = false

# 'roles' looks up users/<email> in the cloud document store,
# 'allow_list' checks allowed_emails
strategy = "roles"

# Identity used by the CLI (or set SONG_CATALOG_USER)
# email = "someone@example.com"

allowed_emails = []
users_collection = "users"

[cloud]
# Push/pull the catalog to a Firestore project
enabled = false
# project_id = "your-project"   (or SONG_CATALOG_FIRESTORE_PROJECT)
# api_key = "your-api-key"      (or SONG_CATALOG_FIRESTORE_API_KEY)
collection = "catalogs"
document_id = "default"
timeout_seconds = 15.0

[export]
# Directory for exported workbooks (default: current directory)
# output_dir = "~/Documents"
filename_prefix = "catalogo-bks"

[logging]
# Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
level = "INFO"

# Custom log file path (default: ~/.local/share/song-catalog/song-catalog.log)
# log_file = "/path/to/custom/song-catalog.log"
""".strip()


def _expand(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    return str(Path(path).expanduser())


def load_config() -> Config:
    """Load configuration from file or create default.

    Environment variables override TOML values:
    - SONG_CATALOG_FIRESTORE_PROJECT
    - SONG_CATALOG_FIRESTORE_API_KEY
    - SONG_CATALOG_USER
    """
    # Load .env file from config directory if it exists
    from dotenv import load_dotenv

    env_path = get_config_dir() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = get_config_path()

    if not config_path.exists():
        # Create config directory and default file
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as f:
            f.write(create_default_config())
        print(f"Created default configuration at: {config_path}")
        return _apply_env_overrides(Config())

    try:
        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"Error loading configuration from {config_path}: {e}")
        print("Using default configuration.")
        return _apply_env_overrides(Config())

    return _apply_env_overrides(parse_config(toml_data))


def parse_config(toml_data: dict) -> Config:
    """Build a Config from parsed TOML data, falling back to defaults."""
    config = Config()

    if "storage" in toml_data:
        storage_data = toml_data["storage"]
        config.storage = StorageConfig(
            database_path=_expand(storage_data.get("database_path")),
            namespace=storage_data.get("namespace", config.storage.namespace),
            sort_key=storage_data.get("sort_key", config.storage.sort_key),
        )

    if "player" in toml_data:
        player_data = toml_data["player"]
        config.player = PlayerConfig(
            mpv_socket_path=player_data.get("mpv_socket_path"),
            volume=player_data.get("volume", config.player.volume),
        )

    if "access" in toml_data:
        access_data = toml_data["access"]
        config.access = AccessConfig(
            enabled=access_data.get("enabled", config.access.enabled),
            strategy=access_data.get("strategy", config.access.strategy),
            email=access_data.get("email"),
            allowed_emails=list(access_data.get("allowed_emails", [])),
            users_collection=access_data.get(
                "users_collection", config.access.users_collection
            ),
        )
        try:
            config.access.validate()
        except ValueError as e:
            print(f"Warning: Invalid access configuration: {e}")
            print("Using default access configuration.")
            config.access = AccessConfig()

    if "cloud" in toml_data:
        cloud_data = toml_data["cloud"]
        config.cloud = CloudConfig(
            enabled=cloud_data.get("enabled", config.cloud.enabled),
            project_id=cloud_data.get("project_id", config.cloud.project_id),
            api_key=cloud_data.get("api_key", config.cloud.api_key),
            collection=cloud_data.get("collection", config.cloud.collection),
            document_id=cloud_data.get("document_id", config.cloud.document_id),
            timeout_seconds=cloud_data.get(
                "timeout_seconds", config.cloud.timeout_seconds
            ),
        )

    if "export" in toml_data:
        export_data = toml_data["export"]
        config.export = ExportConfig(
            output_dir=_expand(export_data.get("output_dir")),
            filename_prefix=export_data.get(
                "filename_prefix", config.export.filename_prefix
            ),
        )

    if "logging" in toml_data:
        logging_data = toml_data["logging"]
        config.logging = LoggingConfig(
            level=logging_data.get("level", config.logging.level).upper(),
            log_file=_expand(logging_data.get("log_file")),
        )

    return config


def _apply_env_overrides(config: Config) -> Config:
    """Override secrets and identity with environment variables if present."""
    project_id = os.environ.get("SONG_CATALOG_FIRESTORE_PROJECT")
    api_key = os.environ.get("SONG_CATALOG_FIRESTORE_API_KEY")
    user = os.environ.get("SONG_CATALOG_USER")

    if project_id:
        config.cloud.project_id = project_id
    if api_key:
        config.cloud.api_key = api_key
    if user:
        config.access.email = user

    return config


def get_database_path(config: Config) -> Path:
    """Get the SQLite file backing the key-value store."""
    if config.storage.database_path:
        return Path(config.storage.database_path)
    return get_data_dir() / "song_catalog.db"


def get_log_file_path(config: Config) -> Path:
    """Get the path to the log file."""
    if config.logging.log_file:
        return Path(config.logging.log_file)
    return get_data_dir() / "song-catalog.log"


def ensure_directories() -> None:
    """Ensure all necessary directories exist."""
    get_config_dir().mkdir(parents=True, exist_ok=True)
    get_data_dir().mkdir(parents=True, exist_ok=True)
