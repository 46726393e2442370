"""
Analysis configuration - YAML file plus environment overrides.
Environment variables are loaded from .env when present.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from dotenv import load_dotenv

from analysis.calculations.moving_average import MovingAverageError, validate_window_sizes
from analysis.models import DEFAULT_VOLUME, DEFAULT_WINDOW_SIZES

# Load environment variables
load_dotenv()

# Set up logger
logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


@dataclass
class AnalysisConfig:
    """Configuration for analysis sessions."""
    window_sizes: Tuple[int, ...] = DEFAULT_WINDOW_SIZES
    default_volume: int = DEFAULT_VOLUME
    sentiment_seed: Optional[int] = None
    history_limit: int = 200

    def __post_init__(self):
        """Validate and normalize."""
        try:
            self.window_sizes = validate_window_sizes(self.window_sizes)
        except MovingAverageError as e:
            raise ConfigError(f"Invalid window_sizes: {e}")

        if not _is_int(self.default_volume) or self.default_volume < 0:
            raise ConfigError(f"default_volume must be a non-negative integer, got {self.default_volume}")

        # numpy generators only accept non-negative seeds
        if self.sentiment_seed is not None and (not _is_int(self.sentiment_seed) or self.sentiment_seed < 0):
            raise ConfigError(f"sentiment_seed must be a non-negative integer, got {self.sentiment_seed}")

        if not _is_int(self.history_limit) or self.history_limit <= 0:
            raise ConfigError(f"history_limit must be a positive integer, got {self.history_limit}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {value!r}")


def load_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Load the analysis section of a YAML config file.

    Raises:
        ConfigError: If the file is missing or malformed
    """
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to load config: {e}")

    if not isinstance(data, dict):
        raise ConfigError("Config file must contain a mapping")

    section = data.get('analysis', data) or {}
    if not isinstance(section, dict):
        raise ConfigError("The analysis section must be a mapping")

    return section


def load_config(config_path: Optional[str] = None) -> AnalysisConfig:
    """
    Build an AnalysisConfig from an optional YAML file and the environment.

    Precedence: environment variables over file values over defaults.

    Environment:
        ANALYSIS_CONFIG_PATH: YAML file used when config_path is not given
        MA_WINDOWS: Comma-separated window sizes (e.g. "5,10,20")
        SENTIMENT_SEED: Integer seed for synthetic sentiment
        DEFAULT_VOLUME: Volume for rows without one
        CHAT_HISTORY_LIMIT: Max chat turns kept per session

    Args:
        config_path: Path to YAML config file

    Returns:
        Validated AnalysisConfig

    Raises:
        ConfigError: If any value is invalid
    """
    if config_path is None:
        config_path = os.getenv('ANALYSIS_CONFIG_PATH')

    values: Dict[str, Any] = {}
    if config_path:
        values.update(load_config_file(Path(config_path)))
        logger.info(f"Loaded analysis config from {config_path}")

    windows_env = os.getenv('MA_WINDOWS', '').strip()
    if windows_env:
        values['window_sizes'] = tuple(
            _parse_int('MA_WINDOWS', part.strip()) for part in windows_env.split(',') if part.strip()
        )

    seed_env = os.getenv('SENTIMENT_SEED', '').strip()
    if seed_env:
        values['sentiment_seed'] = _parse_int('SENTIMENT_SEED', seed_env)

    volume_env = os.getenv('DEFAULT_VOLUME', '').strip()
    if volume_env:
        values['default_volume'] = _parse_int('DEFAULT_VOLUME', volume_env)

    history_env = os.getenv('CHAT_HISTORY_LIMIT', '').strip()
    if history_env:
        values['history_limit'] = _parse_int('CHAT_HISTORY_LIMIT', history_env)

    known = {'window_sizes', 'default_volume', 'sentiment_seed', 'history_limit'}
    unknown = set(values) - known
    if unknown:
        raise ConfigError(f"Unknown config keys: {sorted(unknown)}")

    if 'window_sizes' in values:
        windows = values['window_sizes']
        if not isinstance(windows, (list, tuple)):
            raise ConfigError(f"window_sizes must be a list, got {windows!r}")
        values['window_sizes'] = tuple(windows)

    return AnalysisConfig(**values)
