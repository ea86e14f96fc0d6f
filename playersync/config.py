"""Configuration management using XDG Base Directory Specification.

This module provides centralized configuration for the playback sync core:
poll cadence, the post-seek cooldown window, the "previous" restart threshold
and the audio sink the engine plays through.
"""

import configparser
import os
from pathlib import Path
from typing import Optional

from playersync.exceptions import ConfigurationError

# Defaults shared with the components so they can be built without a config
DEFAULT_POLL_INTERVAL_MS = 16
DEFAULT_SEEK_COOLDOWN_MS = 100
DEFAULT_RESTART_THRESHOLD_SECONDS = 3


class Config:
    """
    Configuration manager using XDG Base Directory Specification.

    Follows Linux standards:
    - Config: ~/.config/playersync/ (or XDG_CONFIG_HOME)
    - Data: ~/.local/share/playersync/ (or XDG_DATA_HOME)
    """

    _instance: Optional['Config'] = None

    def __init__(self) -> None:
        """
        Initialize configuration manager.

        Sets up XDG Base Directory paths and loads or creates configuration.
        """
        # XDG Base Directory paths
        self.config_home = Path(os.getenv('XDG_CONFIG_HOME', Path.home() / '.config'))
        self.data_home = Path(os.getenv('XDG_DATA_HOME', Path.home() / '.local' / 'share'))

        # Application-specific directories
        self.app_name = 'playersync'
        self.config_dir = self.config_home / self.app_name
        self.data_dir = self.data_home / self.app_name

        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self.config_file = self.config_dir / 'config.ini'
        self.config = configparser.ConfigParser()

        self._load_config()

    @classmethod
    def get_instance(cls) -> 'Config':
        """Get the singleton config instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the singleton so the next lookup re-reads the environment."""
        cls._instance = None

    def _load_config(self) -> None:
        """Load configuration from file or create defaults."""
        if self.config_file.exists():
            try:
                self.config.read(self.config_file)
            except configparser.Error as e:
                raise ConfigurationError(f"Invalid config file {self.config_file}: {e}") from e
        else:
            self._create_default_config()

    def _create_default_config(self) -> None:
        """Create default configuration."""
        self.config['playback'] = {
            'poll_interval_ms': str(DEFAULT_POLL_INTERVAL_MS),
            'seek_cooldown_ms': str(DEFAULT_SEEK_COOLDOWN_MS),
            'restart_threshold_seconds': str(DEFAULT_RESTART_THRESHOLD_SECONDS),
            'advance_on_end_of_track': 'false',
        }

        self.config['engine'] = {
            'audio_sink': 'autoaudiosink',
        }

        self.save()

    def save(self) -> None:
        """Save configuration to file."""
        try:
            with open(self.config_file, 'w') as f:
                self.config.write(f)
        except OSError as e:
            from playersync.logging import get_logger
            logger = get_logger(__name__)
            logger.error("Failed to save config: %s", e, exc_info=True)

    def get(self, section: str, key: str, fallback: Optional[str] = None) -> Optional[str]:
        """Get a configuration value."""
        return self.config.get(section, key, fallback=fallback)

    def set(self, section: str, key: str, value: str) -> None:
        """
        Set a configuration value and persist it.

        Args:
            section: Configuration section name
            key: Configuration key name
            value: Value to set
        """
        if section not in self.config:
            self.config.add_section(section)
        self.config.set(section, key, value)
        self.save()

    def get_bool(self, section: str, key: str, fallback: bool = False) -> bool:
        """Get a boolean configuration value."""
        try:
            return self.config.getboolean(section, key, fallback=fallback)
        except ValueError as e:
            raise ConfigurationError(f"[{section}] {key} is not a boolean") from e

    def get_int(self, section: str, key: str, fallback: int = 0) -> int:
        """Get an integer configuration value."""
        try:
            return self.config.getint(section, key, fallback=fallback)
        except ValueError as e:
            raise ConfigurationError(f"[{section}] {key} is not an integer") from e

    # Convenience properties
    @property
    def poll_interval_ms(self) -> int:
        """Progress poll cadence in milliseconds (never below 1)."""
        return max(1, self.get_int('playback', 'poll_interval_ms', DEFAULT_POLL_INTERVAL_MS))

    @property
    def seek_cooldown_ms(self) -> int:
        """Window after a seek during which polled positions are ignored."""
        return max(0, self.get_int('playback', 'seek_cooldown_ms', DEFAULT_SEEK_COOLDOWN_MS))

    @property
    def restart_threshold_seconds(self) -> int:
        """Elapsed time from which "previous" restarts the current track."""
        return self.get_int('playback', 'restart_threshold_seconds', DEFAULT_RESTART_THRESHOLD_SECONDS)

    @property
    def advance_on_end_of_track(self) -> bool:
        return self.get_bool('playback', 'advance_on_end_of_track', False)

    @property
    def audio_sink(self) -> str:
        return self.get('engine', 'audio_sink', 'autoaudiosink')

    @property
    def log_dir(self) -> Path:
        """Get log directory."""
        log_dir = self.data_dir / 'logs'
        log_dir.mkdir(parents=True, exist_ok=True)
        return log_dir


def get_config() -> Config:
    """Get the configuration instance."""
    return Config.get_instance()
