"""
Configuration management for zettel stores.

The configuration is stored as a TOML file in the store directory. It
holds the settings the outliner needs outside the address core: the
address prefilled for new notes, the navigation debounce, display indent
and the name of the notes file.
"""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import tomli_w

CONFIG_FILENAME = "zettel.toml"
CONFIG_VERSION = 1

DEFAULT_NOTES_FILE = "notes.json"
DEFAULT_DEBOUNCE_MS = 80
DEFAULT_INDENT = 2


def get_default_store_path() -> Path:
    """
    Resolve the store directory.

    Priority:
    1. ZETTEL_STORE_PATH environment variable
    2. ~/.zettel
    """
    env_path = os.environ.get("ZETTEL_STORE_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path.home() / ".zettel"


@dataclass
class StoreConfig:
    """Complete store configuration."""
    path: Path
    version: int = CONFIG_VERSION
    created: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    # Address prefilled into the new-note field ("" for none)
    default_address: str = ""
    scroll_debounce_ms: int = DEFAULT_DEBOUNCE_MS
    indent: int = DEFAULT_INDENT
    notes_file: str = DEFAULT_NOTES_FILE

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.path / CONFIG_FILENAME

    @property
    def notes_path(self) -> Path:
        """Path to the JSON notes file."""
        return self.path / self.notes_file

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()


def _int_setting(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"Config setting {key!r} must be a non-negative integer, got {value!r}")
    return value


def load_config(store_path: Path) -> StoreConfig:
    """
    Load configuration from a store directory.

    Raises:
        FileNotFoundError: If config doesn't exist
        ValueError: If config is invalid
    """
    config_path = store_path / CONFIG_FILENAME

    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    store = data.get("store", {})
    version = store.get("version", 1)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    outline = data.get("outline", {})
    return StoreConfig(
        path=store_path,
        version=version,
        created=store.get("created", ""),
        default_address=str(outline.get("default_address", "")),
        scroll_debounce_ms=_int_setting(outline, "scroll_debounce_ms", DEFAULT_DEBOUNCE_MS),
        indent=_int_setting(outline, "indent", DEFAULT_INDENT),
        notes_file=str(store.get("notes_file", DEFAULT_NOTES_FILE)),
    )


def save_config(config: StoreConfig) -> None:
    """
    Save configuration to the store directory.

    Creates the directory if it doesn't exist.
    """
    config.path.mkdir(parents=True, exist_ok=True)

    data = {
        "store": {
            "version": config.version,
            "created": config.created,
            "notes_file": config.notes_file,
        },
        "outline": {
            "default_address": config.default_address,
            "scroll_debounce_ms": config.scroll_debounce_ms,
            "indent": config.indent,
        },
    }

    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)


def load_or_create_config(store_path: Optional[Path] = None) -> StoreConfig:
    """
    Load existing config or create a new one with defaults.

    This is the main entry point for config management.
    """
    if store_path is None:
        store_path = get_default_store_path()
    store_path = Path(store_path)

    if (store_path / CONFIG_FILENAME).exists():
        return load_config(store_path)
    config = StoreConfig(path=store_path)
    save_config(config)
    return config
