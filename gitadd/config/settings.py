"""
Configuration management with Pydantic validation and environment variable support.
"""

import os
import json
from pathlib import Path
from typing import Optional, Literal
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings
from loguru import logger
import platform


class GitSettings(BaseModel):
    """Repository configuration."""

    repo_path: Optional[Path] = Field(
        default=None,
        description="Repository to operate on (default: current directory)"
    )


class UISettings(BaseModel):
    """User interface configuration."""

    use_colors: bool = Field(
        default=True,
        description="Use colored output"
    )
    show_legend: bool = Field(
        default=True,
        description="Show the key and status legend below the file list"
    )
    initial_filter: str = Field(
        default="",
        description="Path filter applied when the session starts"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    git: GitSettings = Field(default_factory=GitSettings)
    ui: UISettings = Field(default_factory=UISettings)

    model_config = {
        "env_prefix": "GITADD_",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def __init__(self, _skip_config_file: bool = False, **kwargs):
        # Fall back to the default config file when nothing explicit was given
        if not kwargs and not _skip_config_file:
            config_path = self._get_default_config_path()
            if config_path.exists():
                try:
                    with open(config_path) as f:
                        kwargs = json.load(f)
                except (json.JSONDecodeError, OSError) as e:
                    logger.warning(f"Ignoring unreadable config file {config_path}: {e}")
                    kwargs = {}

        super().__init__(**kwargs)

    @staticmethod
    def _config_base() -> Path:
        if platform.system() == "Windows":
            return Path(os.environ.get("APPDATA", "~"))
        return Path(os.environ.get("XDG_CONFIG_HOME", "~/.config"))

    @staticmethod
    def _cache_base() -> Path:
        if platform.system() == "Windows":
            return Path(os.environ.get("LOCALAPPDATA", "~"))
        return Path(os.environ.get("XDG_CACHE_HOME", "~/.cache"))

    @classmethod
    def _get_default_config_path(cls) -> Path:
        """Get the default config file path."""
        return (cls._config_base() / "gitadd" / "config.json").expanduser()

    @classmethod
    def from_file(cls, config_path: Path) -> "Settings":
        """Load settings from a configuration file."""
        if config_path.exists():
            with open(config_path) as f:
                config_data = json.load(f)
            return cls(_skip_config_file=True, **config_data)
        return cls()

    def save_to_file(self, config_path: Path) -> None:
        """Save current settings to a configuration file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory."""
        return (self._config_base() / "gitadd").expanduser()

    @property
    def cache_dir(self) -> Path:
        """Get the cache directory."""
        return (self._cache_base() / "gitadd").expanduser()

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.cache_dir / "gitadd.log"
