"""Application configuration management."""

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

CONFIG_DIR = Path.home() / ".config" / "pocket"
CONFIG_FILE = CONFIG_DIR / "config.yaml"


class Settings(BaseSettings):
    """Application settings from environment, .env files and config.yaml.

    Precedence: constructor arguments, ``POCKET_*`` environment variables,
    .env files, then ``~/.config/pocket/config.yaml``.
    """

    model_config = SettingsConfigDict(
        env_prefix="POCKET_",
        env_file=[
            ".env",  # Project-level defaults (lower priority)
            CONFIG_DIR / ".env",  # User config (higher priority)
        ],
        env_file_encoding="utf-8",
        extra="ignore",
        yaml_file=CONFIG_FILE,
    )

    # Paths
    config_dir: Path = Field(default=CONFIG_DIR, description="Configuration directory")

    # AppleScript bridge
    osascript_path: str = Field(default="osascript", description="AppleScript interpreter executable")
    applescript_timeout: int = Field(
        default=30, ge=1, description="Seconds before a script call is abandoned"
    )

    # Output
    output_format: Literal["json", "table"] = Field(default="json", description="Default output format")

    # Integration defaults
    default_reminders_list: str = Field(default="Reminders", description="List used by 'reminders add'")
    default_calendar: str | None = Field(
        default=None, description="Calendar used by 'calendar create' (first writable if unset)"
    )
    default_notes_folder: str | None = Field(default=None, description="Folder used by 'notes create'")
    default_limit: int = Field(default=50, ge=1, description="Default maximum number of results")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_dir: Path = Field(
        default=Path.home() / "Library" / "Logs",
        description="Directory for log files",
    )
    log_rotation_size_mb: int = Field(
        default=5, ge=1, description="Max size per log file in MB before rotation"
    )
    log_backup_count: int = Field(
        default=3, ge=0, description="Number of rotated log files to keep"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @property
    def config_path(self) -> Path:
        """Full path to the YAML config file."""
        return self.config_dir / "config.yaml"

    def ensure_config_dir(self) -> None:
        """Create config directory if it doesn't exist."""
        self.config_dir.mkdir(parents=True, exist_ok=True)


EXAMPLE_CONFIG: dict[str, Any] = {
    "osascript_path": "osascript",
    "applescript_timeout": 30,
    "output_format": "json",
    "default_reminders_list": "Reminders",
    "default_calendar": None,
    "default_notes_folder": None,
    "default_limit": 50,
    "log_level": "INFO",
}


def load_config_file(path: Path) -> dict[str, Any]:
    """Load a YAML config file, empty if it doesn't exist."""
    if not path.exists():
        return {}

    with open(path) as f:
        return yaml.safe_load(f) or {}


def save_config_file(path: Path, values: dict[str, Any]) -> None:
    """Write settings to a YAML config file."""
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        f.write("# pocket configuration\n# Environment variables (POCKET_*) take precedence.\n\n")
        yaml.dump(values, f, default_flow_style=False, sort_keys=False)
